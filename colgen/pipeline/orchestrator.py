from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from colgen import __version__
from colgen.errors import FormatError
from colgen.generator import Generator
from colgen.introspect.resolver import GoSourceResolver
from colgen.replacer import Replacer, apply_replacements
from colgen.rules import parse_rules
from colgen.scanner import output_path_for, read_directives, scan_source
from colgen.utils.config import CONFIG_FILE, load_config, split_imports
from colgen.utils.types import Rule, RunReport

logger = logging.getLogger(__name__)


class Orchestrator:
    def __init__(
        self,
        config_path: Path = Path(CONFIG_FILE),
        list_suffix: Optional[bool] = None,
        imports: Optional[Union[str, Iterable[str]]] = None,
        func_package: Optional[str] = None,
        format_output: Optional[bool] = None,
        package_dirs: Optional[Dict[str, Path]] = None,
        version: str = __version__,
    ) -> None:
        self.config_path = config_path
        self.config = load_config(config_path)
        self.version = version
        self.package_dirs = dict(package_dirs or {})

        generator_cfg = self.config.get("generator", {})
        self.list_suffix = (
            list_suffix if list_suffix is not None else bool(generator_cfg.get("list_suffix", False))
        )
        if imports is None:
            imports = generator_cfg.get("imports", [])
        if isinstance(imports, str):
            imports = split_imports(imports)
        self.imports = list(imports)
        self.func_package = (
            func_package if func_package is not None else str(generator_cfg.get("func_package", ""))
        )
        self.output_suffix = str(generator_cfg.get("output_suffix", "_colgen.go"))

        formatter_cfg = self.config.get("formatter", {})
        self.format_output = (
            format_output if format_output is not None else bool(formatter_cfg.get("enabled", True))
        )
        self.format_command = [str(item) for item in formatter_cfg.get("command", ["gofmt"])]

    def plan(self, source_path: Path) -> List[Rule]:
        return parse_rules(read_directives(source_path).lines, use_list_suffix=self.list_suffix)

    def run(self, source_path: Path) -> RunReport:
        """Process one Go file.

        Injections are applied to the source file and rules are rendered into
        the sibling output file. Both are written only after every step has
        succeeded.
        """
        source_path = Path(source_path)
        original = source_path.read_text(encoding="utf-8")
        directives = scan_source(original)
        report = RunReport(source_path=str(source_path))

        updated = original
        if directives.injections:
            replacer = Replacer(GoSourceResolver(source_path.parent, self.package_dirs))
            report.replacements = replacer.generate(directives.injections)
            updated = apply_replacements(original, report.replacements)
            logger.info("prepared %d replacements for %s", len(report.replacements), source_path)

        output: Optional[str] = None
        if directives.lines:
            report.rules = parse_rules(directives.lines, use_list_suffix=self.list_suffix)
            resolver = GoSourceResolver(
                source_path.parent,
                self.package_dirs,
                sources={source_path.name: updated},
            )
            generator = Generator(
                package_name=directives.package_name,
                imports=self.imports,
                func_package=self.func_package,
                version=self.version,
                resolver=resolver,
                format_command=self.format_command,
            )
            output = generator.generate(report.rules)
            if self.format_output:
                try:
                    output = generator.format(output)
                    report.formatted = True
                except FormatError as exc:
                    logger.warning("saving unformatted output for %s: %s", source_path, exc)
                    report.warnings.append(str(exc))
        elif not directives.injections:
            logger.info("no colgen directives found in %s", source_path)

        if updated != original:
            source_path.write_text(updated, encoding="utf-8")
        if output is not None:
            output_path = output_path_for(source_path, self.output_suffix)
            output_path.write_text(output, encoding="utf-8")
            report.output_path = str(output_path)
            logger.info("wrote %s (%d rules)", output_path, len(report.rules))
        return report
