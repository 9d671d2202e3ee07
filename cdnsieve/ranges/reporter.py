"""Output shaping for classification results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Flag, auto
from typing import Iterable, List, Sequence, TextIO

from .models import Classification


class OutputMode(Flag):
    """Which partitions to emit. Modes combine; NONE emits nothing."""

    NONE = 0
    REAL = auto()
    CDN = auto()

    @classmethod
    def from_flags(cls, real: bool, cdn: bool) -> OutputMode:
        """Build a mode from the ``--real`` / ``--cdn`` switches."""
        mode = cls.NONE
        if real:
            mode |= cls.REAL
        if cdn:
            mode |= cls.CDN
        return mode


@dataclass(slots=True, frozen=True)
class ClassificationReport:
    """Partition of classified IPs, both sides in input order."""

    classifications: tuple[Classification, ...]

    @classmethod
    def from_classifications(cls, classifications: Iterable[Classification]) -> ClassificationReport:
        """Freeze an iterable of classifications into a report."""
        return cls(classifications=tuple(classifications))

    @property
    def cdn_ips(self) -> List[str]:
        """IPs matched to a CDN block."""
        return [c.ip for c in self.classifications if c.is_cdn]

    @property
    def real_ips(self) -> List[str]:
        """IPs outside every CDN block."""
        return [c.ip for c in self.classifications if not c.is_cdn]

    def to_dict(self) -> dict:
        """Return counts and both partitions as a plain dictionary."""
        return {
            "total": len(self.classifications),
            "cdn": self.cdn_ips,
            "real": self.real_ips,
        }


def report(classifications: Sequence[Classification], mode: OutputMode) -> List[str]:
    """Return the lines to emit for ``mode``.

    Real IPs come first when both modes are set. Duplicated inputs are
    emitted once per occurrence.
    """
    summary = ClassificationReport.from_classifications(classifications)
    lines: List[str] = []
    if mode & OutputMode.REAL:
        lines.extend(summary.real_ips)
    if mode & OutputMode.CDN:
        lines.extend(summary.cdn_ips)
    return lines


def write_report(lines: Iterable[str], stream: TextIO) -> int:
    """Write newline-terminated ``lines`` to ``stream`` and return the count."""
    count = 0
    for line in lines:
        stream.write(f"{line}\n")
        count += 1
    stream.flush()
    return count
