"""Remote escalation of files the local passes could not repair."""

from __future__ import annotations

import json
import logging
import re
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import SourceFile, normalize_path
from ..prompting import MAX_FILES_PER_BATCH, FixPromptBuilder, PromptRequest
from .runner import LLMRunner

DEFAULT_FIX_NOTE = "Syntax correction"
_WHITESPACE = re.compile(r"\s+")


class EscalationError(RuntimeError):
    """Raised internally when a batch cannot be fixed remotely."""


@dataclass
class EscalationRequest:
    """Files to send for remote repair, with optional scope restriction."""

    files: List[SourceFile]
    strict_scope: bool = False
    allowed_paths: Optional[Sequence[str]] = None
    findings: Dict[str, List[str]] = field(default_factory=dict)


@dataclass
class FixedFile:
    """A file as returned by the fixer."""

    path: str
    content: str
    language: str
    was_fixed: bool = False
    fixes: List[str] = field(default_factory=list)

    def to_source(self) -> SourceFile:
        return SourceFile(path=self.path, content=self.content, language=self.language)


@dataclass
class EscalationResponse:
    files: List[FixedFile]
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def fixed(self) -> List[FixedFile]:
        return [file for file in self.files if file.was_fixed]


def was_modified(original: str, candidate: str) -> bool:
    """Return True when contents differ beyond whitespace."""
    return _WHITESPACE.sub("", original) != _WHITESPACE.sub("", candidate)


class CodeFixer:
    """Sends batches of files to an LLM and merges the corrected versions back."""

    def __init__(
        self,
        runner: LLMRunner,
        *,
        prompt_builder: FixPromptBuilder | None = None,
        batch_size: int = MAX_FILES_PER_BATCH,
        timeout: float = 120.0,
        poll_interval: float = 0.1,
        logger: logging.Logger | None = None,
    ) -> None:
        self.runner = runner
        self.prompt_builder = prompt_builder or FixPromptBuilder()
        self.batch_size = max(1, min(batch_size, MAX_FILES_PER_BATCH))
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.logger = logger or get_logger("escalation")

    def escalate(
        self,
        request: EscalationRequest,
        abort: threading.Event | None = None,
    ) -> EscalationResponse:
        """Repair ``request.files`` remotely.

        Failures never propagate: the affected files come back unchanged with
        ``was_fixed`` false and the first failure is reported in ``error``.
        """
        allowed = self._allowed_paths(request)
        outgoing = [
            file for file in request.files if allowed is None or file.path in allowed
        ]
        skipped = len(request.files) - len(outgoing)
        if skipped:
            self.logger.debug("Excluded %d file(s) outside the allowed scope", skipped)
        if not outgoing:
            return EscalationResponse(files=[])

        results: List[FixedFile] = []
        warnings: List[str] = []
        error: Optional[str] = None
        batches = self._batches(outgoing)
        for index, batch in enumerate(batches, start=1):
            if abort is not None and abort.is_set():
                error = error or "Escalation aborted"
                results.extend(_unchanged(file) for file in batch)
                continue
            self.logger.info(
                "Escalating batch %d/%d (%d file(s))", index, len(batches), len(batch)
            )
            try:
                prompt = self.prompt_builder.build(
                    batch,
                    findings=request.findings,
                    allowed_paths=sorted(allowed) if allowed is not None else None,
                )
                raw = self._call(prompt, abort)
                entries, parse_warnings = parse_fix_response(raw)
            except RuntimeError as exc:
                self.logger.warning("Escalation batch %d failed: %s", index, exc)
                if error is None:
                    error = str(exc)
                results.extend(_unchanged(file) for file in batch)
                continue
            warnings.extend(parse_warnings)
            merged, merge_warnings = self._merge(batch, entries, allowed)
            warnings.extend(merge_warnings)
            results.extend(merged)

        for message in warnings:
            self.logger.warning(message)
        fixed = sum(1 for file in results if file.was_fixed)
        self.logger.info("Escalation fixed %d of %d file(s)", fixed, len(results))
        return EscalationResponse(files=results, error=error, warnings=warnings)

    def _allowed_paths(self, request: EscalationRequest) -> set[str] | None:
        if not request.strict_scope:
            return None
        return {normalize_path(path) for path in request.allowed_paths or []}

    def _batches(self, files: Sequence[SourceFile]) -> List[List[SourceFile]]:
        return [
            list(files[start : start + self.batch_size])
            for start in range(0, len(files), self.batch_size)
        ]

    def _call(self, prompt: PromptRequest, abort: threading.Event | None) -> str:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="genfix-escalation")
        future = executor.submit(self.runner.run, prompt.prompt, system=prompt.system)
        deadline = time.monotonic() + self.timeout
        try:
            while True:
                if abort is not None and abort.is_set():
                    future.cancel()
                    raise EscalationError("Escalation aborted")
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    future.cancel()
                    raise EscalationError(f"Escalation timed out after {self.timeout:g}s")
                done, _ = wait([future], timeout=min(self.poll_interval, remaining))
                if not done:
                    continue
                exc = future.exception()
                if exc is None:
                    return future.result()
                if isinstance(exc, RuntimeError):
                    raise exc
                raise EscalationError(f"Escalation call failed: {type(exc).__name__}: {exc}") from exc
        finally:
            executor.shutdown(wait=False)

    def _merge(
        self,
        batch: Sequence[SourceFile],
        entries: Sequence[Mapping[str, Any]],
        allowed: set[str] | None,
    ) -> Tuple[List[FixedFile], List[str]]:
        warnings: List[str] = []
        requested = {file.path for file in batch}
        returned: Dict[str, Mapping[str, Any]] = {}
        for entry in entries:
            path = normalize_path(entry["path"])
            if allowed is not None and path not in allowed:
                warnings.append(f"Dropped out-of-scope file from escalation: {path}")
                continue
            if path not in requested:
                warnings.append(f"Ignored unrequested file from escalation: {path}")
                continue
            returned[path] = entry

        merged: List[FixedFile] = []
        for file in batch:
            entry = returned.get(file.path)
            if entry is None:
                merged.append(_unchanged(file))
                continue
            content = entry["content"]
            if not was_modified(file.content, content):
                merged.append(_unchanged(file))
                continue
            merged.append(
                FixedFile(
                    path=file.path,
                    content=content,
                    language=file.language,
                    was_fixed=True,
                    fixes=list(entry["fixes"]),
                )
            )
        return merged, warnings


def _unchanged(file: SourceFile) -> FixedFile:
    return FixedFile(path=file.path, content=file.content, language=file.language)


def parse_fix_response(raw: str) -> Tuple[List[Dict[str, Any]], List[str]]:
    """Decode a fixer reply into ``{path, content, fixes}`` entries.

    Malformed entries are skipped with a warning; a reply without a usable
    ``files`` list raises :class:`EscalationError`.
    """
    text = _strip_code_fences(raw)
    obj_text = _extract_first_json_object(text)
    try:
        data = json.loads(obj_text)
    except json.JSONDecodeError:
        repaired = _escape_control_chars(obj_text)
        try:
            data = json.loads(repaired)
        except json.JSONDecodeError as exc:
            raise EscalationError(f"Fixer reply is not valid JSON: {exc.msg}") from exc

    if not isinstance(data, dict):
        raise EscalationError("Fixer reply must be a JSON object")
    files = data.get("files")
    if not isinstance(files, list):
        raise EscalationError("Fixer reply is missing a 'files' list")

    entries: List[Dict[str, Any]] = []
    warnings: List[str] = []
    for index, item in enumerate(files):
        if not isinstance(item, dict):
            warnings.append(f"Skipped malformed fixer entry #{index}")
            continue
        path = item.get("path")
        content = item.get("content")
        if not isinstance(path, str) or not path.strip() or not isinstance(content, str):
            warnings.append(f"Skipped malformed fixer entry #{index}")
            continue
        fixes = item.get("fixes")
        if isinstance(fixes, list):
            notes = [str(note) for note in fixes if isinstance(note, (str, int, float))]
        else:
            notes = []
        entries.append(
            {"path": path, "content": content, "fixes": notes or [DEFAULT_FIX_NOTE]}
        )
    return entries, warnings


def _strip_code_fences(text: str) -> str:
    stripped = text.strip()
    if stripped.startswith("```"):
        lines = stripped.splitlines()
        if len(lines) >= 2 and lines[-1].strip() == "```":
            stripped = "\n".join(lines[1:-1]).strip()
    return stripped


def _extract_first_json_object(text: str) -> str:
    start = text.find("{")
    if start == -1:
        raise EscalationError("Fixer reply contains no JSON object")

    in_string = False
    escape = False
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escape:
                escape = False
            elif char == "\\":
                escape = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]

    raise EscalationError("Fixer reply contains an unterminated JSON object")


def _escape_control_chars(text: str) -> str:
    """Escape raw control characters that appear inside JSON strings."""
    out: List[str] = []
    in_string = False
    escape = False
    for char in text:
        if not in_string:
            out.append(char)
            if char == '"':
                in_string = True
            continue
        if escape:
            out.append(char)
            escape = False
        elif char == "\\":
            out.append(char)
            escape = True
        elif char == '"':
            out.append(char)
            in_string = False
        elif char == "\n":
            out.append("\\n")
        elif char == "\r":
            out.append("\\r")
        elif char == "\t":
            out.append("\\t")
        elif ord(char) < 0x20:
            out.append(f"\\u{ord(char):04x}")
        else:
            out.append(char)
    return "".join(out)


__all__ = [
    "CodeFixer",
    "EscalationError",
    "EscalationRequest",
    "EscalationResponse",
    "FixedFile",
    "parse_fix_response",
    "was_modified",
]
