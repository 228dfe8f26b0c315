"""Create the skeleton of a new Swoft component package."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from devtool.config import BUNDLED_TEMPLATE_DIR, default_username
from devtool.creator.base import BaseCreator, ExecNotifier
from devtool.errors import MissingRequiredInput, TargetExists, WriteError
from devtool.scaffolder.templates import TemplateRenderer
from devtool.utils import ucfirst


@dataclass(frozen=True)
class FileManifestEntry:
    """One file of the component skeleton.

    ``source`` is relative to the component template directory and
    ``destination`` to the new component directory.  Entries with ``render``
    unset are copied verbatim.
    """

    source: str
    destination: str
    render: bool = False
    license: bool = False


@dataclass(frozen=True)
class ComponentCreationState:
    """Validated inputs of one component creation."""

    name: str
    output_dir: str
    target_path: str
    username: str
    pkg_name: str
    namespace: str
    no_license: bool


def component_manifest(no_license: bool = False) -> list[FileManifestEntry]:
    """Return the files to create, in creation order."""
    readme = "component/README-nlc.stub" if no_license else "component/README.stub"
    entries = [
        FileManifestEntry("gitignore.stub", ".gitignore"),
        FileManifestEntry("LICENSE.stub", "LICENSE", license=True),
        FileManifestEntry(readme, "README.md", render=True),
        FileManifestEntry("component/test-bootstrap.stub", "test/bootstrap.php"),
        FileManifestEntry("component/autoload.stub", "src/AutoLoader.php", render=True),
        FileManifestEntry("component/composer.json.stub", "composer.json", render=True),
    ]
    if no_license:
        entries = [entry for entry in entries if not entry.license]
    return entries


class ComponentCreator(BaseCreator):
    """Create a component directory from the bundled skeleton manifest."""

    def __init__(
        self,
        name: str = "",
        work_dir: str | Path = "",
        output_dir: str | Path = "",
        namespace: str = "",
        pkg_name: str = "",
        username: str = "",
        no_license: bool = False,
        template_dir: str | Path | None = None,
        on_exec_cmd: ExecNotifier | None = None,
    ) -> None:
        super().__init__(name=name, work_dir=work_dir, on_exec_cmd=on_exec_cmd)
        self.output_dir = str(output_dir)
        self.namespace = namespace.strip()
        self.pkg_name = pkg_name.strip()
        self.username = username or default_username()
        self.no_license = no_license
        self.template_dir = Path(template_dir) if template_dir else BUNDLED_TEMPLATE_DIR
        self.state: ComponentCreationState | None = None

    @property
    def target_path(self) -> str:
        return self.state.target_path if self.state is not None else ""

    def validate(self) -> bool:
        if not self.name:
            self.fail(MissingRequiredInput("please set the new component name"))
            return False

        output_dir = self.output_dir or self.work_dir
        namespace = self.namespace or ucfirst(self.name)
        self.state = ComponentCreationState(
            name=self.name,
            output_dir=output_dir,
            target_path=os.path.join(output_dir, self.name) if output_dir else self.name,
            username=self.username,
            pkg_name=self.pkg_name or f"{self.username}/{self.name}",
            namespace=namespace.replace("/", "\\"),
            no_license=self.no_license,
        )
        return True

    def info(self) -> dict[str, Any]:
        if self.state is None:
            return {"name": self.name}
        return {
            "name": self.state.name,
            "pkgName": self.state.pkg_name,
            "namespace": self.state.namespace,
            "outputDir": self.state.output_dir,
            "targetPath": self.state.target_path,
            "noLicense": self.state.no_license,
        }

    def template_vars(self) -> dict[str, str]:
        assert self.state is not None
        return {
            "name": self.state.name,
            "pkg_name": self.state.pkg_name,
            "pkg_namespace": self.state.namespace,
        }

    async def create(self) -> None:
        """Create the component directory and every manifest file in it.

        Stops at the first failed write; template errors propagate.
        """
        if self.failure is None and self.state is None:
            self.validate()
        if self.failure is not None or self.state is None:
            return

        target = Path(self.state.target_path)
        if target.exists():
            self.fail(TargetExists("the component dir has been exist!"))
            return

        self.notify(f"create component dir: {target}")
        try:
            target.mkdir(parents=True)
        except OSError as exc:
            self.fail(WriteError(str(target), exc.strerror or str(exc)))
            return

        renderer = TemplateRenderer(template_dir=self.template_dir)
        context = self.template_vars()

        for entry in component_manifest(self.state.no_license):
            out_file = target / entry.destination
            self.notify(f"create file: {out_file}")

            if entry.render:
                ok = await renderer.render_to_file(out_file, context, entry.source)
            else:
                source = renderer.template_path(entry.source)
                ok = await renderer.write_raw(out_file, source.read_text(encoding="utf-8"))

            if not ok:
                self.fail(renderer.last_error or WriteError(str(out_file)))
                return
