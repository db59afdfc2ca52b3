"""
Expansion Trace Logger.

Records the step-by-step execution of a module expansion:

1. Lifecycle phases (Parsing, Scope Analysis, Expansion, Imports).
2. Macro matches (``$signal`` at line 3 bound to ``count``).
3. Rewrites (``count++`` became ``count[1](count[0]() + 1)``).
4. Import actions (``createSignal as _signal`` from ``solid-js``).

The output is a list of dictionaries suitable for JSON serialization, exposed
through `TransformResult.trace_events` and the CLI ``--json-trace`` option.
"""

import time
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  MACRO_MATCH = "macro_match"
  REWRITE = "rewrite"
  IMPORT_ACTION = "import_action"
  INSPECTION = "inspection"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Records expansion events.
  Shared by the engine and the macro rules through `get_tracer`.
  """

  def __init__(self) -> None:
    self._events: List[TraceEvent] = []
    self._active_phases: List[str] = []

  def start_phase(self, name: str, description: str = "") -> str:
    """Starts a nested phase. Returns the phase ID."""
    phase_id = str(uuid.uuid4())
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=phase_id,
        type=TraceEventType.PHASE_START,
        timestamp=time.time(),
        description=name,
        parent_id=parent,
        metadata={"detail": description},
      )
    )
    self._active_phases.append(phase_id)
    return phase_id

  def end_phase(self) -> None:
    """Ends the current active phase."""
    if not self._active_phases:
      return
    phase_id = self._active_phases.pop()
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()),
        type=TraceEventType.PHASE_END,
        timestamp=time.time(),
        description="End Phase",
        parent_id=phase_id,
      )
    )

  def log_macro(self, marker: str, binding: Optional[str], line: Optional[int]) -> None:
    """Logs a marker call picked up for expansion."""
    target = binding if binding else "(expression)"
    self._log_simple(
      TraceEventType.MACRO_MATCH,
      f"{marker}() -> {target}",
      {"marker": marker, "binding": binding, "line": line},
    )

  def log_rewrite(self, form: str, before: str, after: str) -> None:
    """Logs one occurrence rewrite."""
    self._log_simple(TraceEventType.REWRITE, f"Rewrote {form}", {"before": before, "after": after})

  def log_import(self, module: str, export: str, local: str) -> None:
    self._log_simple(
      TraceEventType.IMPORT_ACTION,
      f"Import {export} as {local} from {module}",
      {"module": module, "export": export, "local": local},
    )

  def log_inspection(self, node_str: str, outcome: str, detail: str = "") -> None:
    """Logs a decision point where no change occurred."""
    self._log_simple(TraceEventType.INSPECTION, f"Inspecting '{node_str}'", {"outcome": outcome, "detail": detail})

  def _log_simple(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]) -> None:
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()), type=evt_type, timestamp=time.time(), description=desc, parent_id=parent, metadata=meta
      )
    )

  def export(self) -> List[Dict[str, Any]]:
    """Returns list of dicts for JSON serialization."""
    return [asdict(e) for e in self._events]


_GLOBAL_TRACER = TraceLogger()


def get_tracer() -> TraceLogger:
  return _GLOBAL_TRACER


def reset_tracer() -> None:
  global _GLOBAL_TRACER
  _GLOBAL_TRACER = TraceLogger()
