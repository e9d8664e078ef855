"""
Documentation Orchestrator.

Walks files and directories, renders every interface document it finds to
a sibling ``<stem>.abi.md``, or, in check mode, verifies that the existing
file is up to date.

Example:
    >>> orchestrator = DocumentationOrchestrator(AbiDocsConfig(check=True))
    >>> orchestrator.render_paths([Path("interfaces")])
    [RenderOutcome(source=..., destination=..., status='up_to_date'), ...]
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from abi_docs.config import AbiDocsConfig
from abi_docs.errors import ErrorReport, OutOfDateError
from abi_docs.loader import interface_stem, load_interface
from abi_docs.logging import bind_context, clear_context, get_logger
from abi_docs.renderers.document import DocumentRenderer, RenderResult

logger = get_logger(__name__)

WRITTEN = "written"
UP_TO_DATE = "up_to_date"
OUT_OF_DATE = "out_of_date"


@dataclass(frozen=True)
class RenderOutcome:
    source: Path
    destination: Path
    status: str
    size: int = 0


class DocumentationOrchestrator:
    """Render interface documents found on disk.

    Manifesto:
        Each file is an independent render pass with its own buffer,
        anchor registry and layout oracle. Output is byte-identical for
        unchanged input, so check mode is a plain string comparison.

    Architecture:
        ```
        render_paths(paths)
              │
              ├──► directory ──► render_dir (sorted, recursive)
              │
              └──► file ──► render_file
                              │
                              ├──► load_interface()
                              ├──► DocumentRenderer.render()
                              └──► write <stem>.abi.md | compare (check)
        ```

    Guardrails:
        - Do NOT stop at the first stale file in check mode
          ✅ Collect every stale file, then raise
        - Do NOT swallow load or contract errors
          ✅ They propagate to the caller
    """

    def __init__(self, config: AbiDocsConfig | None = None):
        self.config = config or AbiDocsConfig()
        self.renderer = DocumentRenderer(self.config.variant)
        self.report = ErrorReport()

    def render_paths(self, paths: Iterable[Path]) -> list[RenderOutcome]:
        """Render every interface document under ``paths``.

        Raises:
            OutOfDateError: In check mode, when any output is stale; the
                message lists every stale file
        """
        self.report = ErrorReport()
        outcomes: list[RenderOutcome] = []
        for path in paths:
            outcomes.extend(self.render_path(Path(path)))

        if self.report:
            stale = [e.path for e in self.report.errors if isinstance(e, OutOfDateError)]
            error = OutOfDateError(
                ", ".join(stale),
                message="not up to date: " + ", ".join(stale),
            )
            error.with_context(files=stale)
            logger.warning("check_failed", errors=self.report.to_list())
            raise error
        return outcomes

    def render_path(self, path: Path) -> list[RenderOutcome]:
        if path.is_dir():
            return self.render_dir(path)
        outcome = self.render_file(path)
        return [outcome] if outcome else []

    def render_dir(self, path: Path) -> list[RenderOutcome]:
        outcomes: list[RenderOutcome] = []
        for child in sorted(path.iterdir()):
            outcomes.extend(self.render_path(child))
        return outcomes

    def render_file(self, path: Path) -> RenderOutcome | None:
        """Render one interface document; returns None for other files."""
        stem = interface_stem(path, self.config.input_suffixes)
        if stem is None:
            logger.debug("file_skipped", path=str(path))
            return None

        bind_context(source=str(path))
        try:
            iface = load_interface(path)
            result = self.renderer.render(iface)
            destination = path.parent / f"{stem}{self.config.output_suffix}"

            if self.config.check:
                return self._check(path, destination, result)
            return self._write(path, stem, destination, result)
        finally:
            clear_context()

    def _write(
        self, source: Path, stem: str, destination: Path, result: RenderResult
    ) -> RenderOutcome:
        destination.write_text(result.text, encoding="utf-8")
        if self.config.write_hrefs:
            hrefs_path = source.parent / f"{stem}{self.config.hrefs_suffix}"
            hrefs_path.write_text(
                json.dumps(result.hrefs, indent=2, sort_keys=True) + "\n", encoding="utf-8"
            )

        size = len(result.text.encode("utf-8"))
        logger.info("file_rendered", destination=str(destination), bytes=size)
        return RenderOutcome(source, destination, WRITTEN, size)

    def _check(self, source: Path, destination: Path, result: RenderResult) -> RenderOutcome:
        try:
            previous = destination.read_text(encoding="utf-8")
        except FileNotFoundError:
            previous = None

        if previous != result.text:
            logger.warning("file_out_of_date", destination=str(destination))
            self.report.add(OutOfDateError(str(destination)))
            return RenderOutcome(source, destination, OUT_OF_DATE)

        logger.info("file_up_to_date", destination=str(destination))
        return RenderOutcome(source, destination, UP_TO_DATE, len(previous.encode("utf-8")))
