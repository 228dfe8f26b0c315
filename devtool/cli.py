"""Devtool command line.

Usage::

    devtool gen controller user --prefix /users
    devtool gen command demo @app/Command -y
    devtool new app my-app --type http
    devtool new component my-component --no-license
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

from rich.prompt import Confirm

from devtool.config import DevtoolConfig
from devtool.creator import ComponentCreator, ProjectCreator
from devtool.errors import DevtoolError
from devtool.scaffolder import ArtifactType, CodeGenerator, GenerationOptions
from devtool.utils import (
    console,
    print_command,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)

# Sub-command names (and short aliases) of ``devtool gen``.
GEN_KINDS: dict[str, ArtifactType] = {
    "command": ArtifactType.CLI_COMMAND,
    "cmd": ArtifactType.CLI_COMMAND,
    "controller": ArtifactType.HTTP_CONTROLLER,
    "ctrl": ArtifactType.HTTP_CONTROLLER,
    "middleware": ArtifactType.HTTP_MIDDLEWARE,
    "mdl": ArtifactType.HTTP_MIDDLEWARE,
    "listener": ArtifactType.EVT_LISTENER,
    "task": ArtifactType.TASK,
    "crontab": ArtifactType.TASK_CRONTAB,
    "process": ArtifactType.USER_PROCESS,
    "ws-module": ArtifactType.WS_MODULE,
    "wsm": ArtifactType.WS_MODULE,
    "ws-controller": ArtifactType.WS_CONTROLLER,
    "wsc": ArtifactType.WS_CONTROLLER,
    "rpc-controller": ArtifactType.RPC_CONTROLLER,
    "rpc-ctrl": ArtifactType.RPC_CONTROLLER,
    "rpc-middleware": ArtifactType.RPC_MIDDLEWARE,
    "tcp-controller": ArtifactType.TCP_CONTROLLER,
}


# ---------------------------------------------------------------------------
# gen
# ---------------------------------------------------------------------------


def _cmd_gen(args: argparse.Namespace, config: DevtoolConfig) -> int:
    options = GenerationOptions(
        name=args.name,
        out_dir=args.dir,
        tpl_file=args.tpl_file,
        tpl_dir=args.tpl_dir,
        namespace=args.namespace,
        suffix=args.suffix,
        prefix=args.prefix,
        rest=args.rest,
        yes=args.yes,
        preview=args.preview,
    )
    generator = CodeGenerator(config)
    outcome = asyncio.run(generator.run(GEN_KINDS[args.kind], options))
    return outcome.exit_code


# ---------------------------------------------------------------------------
# new app / new component
# ---------------------------------------------------------------------------


def _quit() -> int:
    console.print("Quit, Bye!", style="cyan")
    return 0


async def _new_app(args: argparse.Namespace, config: DevtoolConfig) -> int:
    pcr = ProjectCreator(
        name=args.name,
        type=args.type,
        repo=args.repo,
        work_dir=config.work_dir,
        refresh=args.refresh,
        no_install=args.no_install,
        cache_dir=config.cache_dir,
        install_command=config.install_command,
        on_exec_cmd=print_command,
    )
    if not pcr.validate():
        print_error(pcr.error)
        return 1

    print_summary_table(pcr.info(), title="Information")

    path = pcr.project_path
    if os.path.exists(path):
        if not args.yes and not Confirm.ask("project has been exist! delete it", default=False):
            return _quit()
        print_warning(f"Removing the existing project dir: {path}")
        try:
            deleted = await pcr.delete_dir(path)
        except ValueError as exc:
            print_error(str(exc))
            return 1
        if not deleted:
            print_error(pcr.error)
            return 1

    if not args.yes and not Confirm.ask("ensure create application", default=True):
        return _quit()

    await pcr.create()
    await pcr.install()
    if pcr.error:
        print_error(pcr.error)
        return 1

    print_success("Completed!")
    console.print(f"Project: {path} created", highlight=False)
    return 0


def _cmd_new_app(args: argparse.Namespace, config: DevtoolConfig) -> int:
    return asyncio.run(_new_app(args, config))


async def _new_component(args: argparse.Namespace, config: DevtoolConfig) -> int:
    ccr = ComponentCreator(
        name=args.name,
        work_dir=config.work_dir,
        output_dir=args.output,
        namespace=args.namespace,
        pkg_name=args.pkg_name,
        username=config.username,
        no_license=args.no_license,
        template_dir=config.component_template_dir,
        on_exec_cmd=print_command,
    )
    if not ccr.validate():
        print_error(ccr.error)
        return 1

    print_summary_table(ccr.info(), title="Information")

    if not args.yes and not Confirm.ask("ensure create component", default=True):
        return _quit()

    await ccr.create()
    if ccr.error:
        print_error(ccr.error)
        return 1

    print_success("Completed!")
    console.print(f"Component: {ccr.target_path} created", highlight=False)
    return 0


def _cmd_new_component(args: argparse.Namespace, config: DevtoolConfig) -> int:
    return asyncio.run(_new_component(args, config))


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devtool",
        description="Swoft devtool -- generate classes and create projects/components",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  devtool gen controller user --prefix /users\n"
            "  devtool gen listener userLogin -y\n"
            "  devtool new app my-app --type http\n"
            "  devtool new component my-component -o ./libs\n"
        ),
    )
    commands = parser.add_subparsers(dest="command", required=True)

    # -- gen ---------------------------------------------------------------
    gen = commands.add_parser("gen", help="Generate a class file from a template")
    gen.add_argument("kind", choices=sorted(GEN_KINDS), help="Kind of class to generate")
    gen.add_argument("name", nargs="?", default="", help="Class name, without suffix and extension")
    gen.add_argument("dir", nargs="?", default="", help="Output directory (may start with an @alias)")
    gen.add_argument("--tpl-file", default="", help="Template filename or full path")
    gen.add_argument("--tpl-dir", default="", help="Template directory")
    gen.add_argument("--namespace", "-n", default="", help="Class namespace")
    gen.add_argument("--suffix", default="", help="Class name suffix")
    gen.add_argument("--prefix", default="", help="Route prefix or command group")
    gen.add_argument(
        "--rest",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Use the RESTful controller template (default: yes)",
    )
    gen.add_argument("--yes", "-y", action="store_true", help="Skip every confirmation")
    gen.add_argument("--preview", action="store_true", help="Show the rendered content before writing")
    gen.set_defaults(handler=_cmd_gen)

    # -- new ---------------------------------------------------------------
    new = commands.add_parser("new", help="Create a new application or component")
    targets = new.add_subparsers(dest="target", required=True)

    app = targets.add_parser("app", help="Create a new application from a template repository")
    app.add_argument("name", help="Project name")
    app.add_argument("--type", default="", help="Project preset: http, ws, tcp, rpc")
    app.add_argument("--repo", default="", help="Template repository URL or user/repo")
    app.add_argument("--refresh", action="store_true", help="Re-clone the cached template repository")
    app.add_argument("--no-install", action="store_true", help="Do not run the dependency installer")
    app.add_argument("--yes", "-y", action="store_true", help="Skip every confirmation")
    app.set_defaults(handler=_cmd_new_app)

    component = targets.add_parser("component", help="Create a new component package")
    component.add_argument("name", help="Component name")
    component.add_argument("--output", "-o", default="", help="Output directory (default: current dir)")
    component.add_argument("--namespace", "-n", default="", help="Component namespace")
    component.add_argument("--pkg-name", default="", help="Package name (default: <username>/<name>)")
    component.add_argument("--no-license", action="store_true", help="Do not add a LICENSE file")
    component.add_argument("--yes", "-y", action="store_true", help="Skip every confirmation")
    component.set_defaults(handler=_cmd_new_component)

    return parser


def run(argv: list[str] | None = None) -> int:
    """Parse *argv*, dispatch the sub-command and return its exit code."""
    args = build_parser().parse_args(argv)
    config = DevtoolConfig.from_env()

    try:
        return args.handler(args, config)
    except DevtoolError as exc:
        print_error(str(exc))
        return 1


def main() -> None:
    """CLI entry point for ``devtool`` and ``python -m devtool``."""
    sys.exit(run())


if __name__ == "__main__":
    main()
