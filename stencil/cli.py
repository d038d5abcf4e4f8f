from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import DEFAULT_CFG_FILE, StencilConfig, load_config, load_vars
from .errors import StencilUserError
from .jsonic import dumps as jdumps
from .report_schema import AstReport, CheckReport
from .template import NullPolicy, Template, parse_template_file
from .template.nodes import node_to_dict
from .version import tool_version

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or os.environ.get("STENCIL_DEBUG") else logging.INFO
    root = logging.getLogger("stencil")
    root.setLevel(level)
    if not root.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        root.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="stencil",
        description="Render $reference templates",
        add_help=True,
    )
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("template", type=Path, help="template file")
        sp.add_argument(
            "--config",
            type=Path,
            default=Path(DEFAULT_CFG_FILE),
            help=f"config file (default: ./{DEFAULT_CFG_FILE}, ignored if absent)",
        )

    sp_render = sub.add_parser("render", help="Render the template to stdout")
    add_common(sp_render)
    sp_render.add_argument(
        "--vars",
        action="append",
        type=Path,
        metavar="FILE",
        help="YAML mapping of bindings (can be given several times)",
    )
    sp_render.add_argument(
        "--var",
        action="append",
        metavar="NAME=VALUE",
        help="single string binding (can be given several times)",
    )
    sp_render.add_argument(
        "--null-policy",
        choices=[policy.value for policy in NullPolicy],
        help="how references evaluating to null are rendered (overrides config)",
    )

    sp_check = sub.add_parser("check", help="Parse only; JSON with referenced variables")
    add_common(sp_check)

    sp_ast = sub.add_parser("ast", help="Print the parsed AST")
    add_common(sp_ast)
    sp_ast.add_argument("--json", action="store_true", help="print the AST as JSON")

    return p


def _parse_var_pairs(pairs: Optional[List[str]]) -> Dict[str, str]:
    """Parses NAME=VALUE pairs; the value may itself contain '='."""
    result: Dict[str, str] = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise ValueError(f"Invalid variable '{pair}'. Expected 'NAME=VALUE'")
        name, value = pair.split("=", 1)
        name = name.strip()
        if not name:
            raise ValueError(f"Invalid variable '{pair}'. Name is empty")
        result[name] = value
    return result


def _collect_bindings(ns: argparse.Namespace, cfg: StencilConfig) -> Dict[str, Any]:
    bindings: Dict[str, Any] = dict(cfg.vars)
    for path in ns.vars or []:
        bindings.update(load_vars(path, cfg.encoding))
    bindings.update(_parse_var_pairs(ns.var))
    return bindings


def _load_template(ns: argparse.Namespace, cfg: StencilConfig) -> Template:
    if not ns.template.is_file():
        raise ValueError(f"Template not found: {ns.template}")
    return parse_template_file(ns.template, encoding=cfg.encoding)


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose)

    try:
        cfg = load_config(ns.config)
        template = _load_template(ns, cfg)

        if ns.cmd == "render":
            null_policy = NullPolicy(ns.null_policy) if ns.null_policy else cfg.null_policy
            bindings = _collect_bindings(ns, cfg)
            logger.debug(f"Rendering {ns.template} with {len(bindings)} bindings")
            sys.stdout.write(template.render(bindings, null_policy=null_policy))
            return 0

        if ns.cmd == "check":
            report = CheckReport(
                template=str(ns.template),
                variables=sorted(template.variable_names()),
                references=[str(ref) for ref in template.references()],
            )
            sys.stdout.write(jdumps(report))
            return 0

        if ns.cmd == "ast":
            if ns.json:
                ast_report = AstReport(
                    template=str(ns.template),
                    nodes=[node_to_dict(node) for node in template.nodes],
                )
                sys.stdout.write(jdumps(ast_report))
            else:
                sys.stdout.write(template.format_tree() + "\n")
            return 0

    except StencilUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except OSError as e:
        sys.stderr.write(f"{e}\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
