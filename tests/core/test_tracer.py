"""
Tests for the expansion trace logger.
"""

import json

from solid_macros.core.engine import MacroEngine
from solid_macros.core.tracer import TraceEventType, TraceLogger, get_tracer, reset_tracer


def test_phase_nesting():
  tracer = TraceLogger()
  outer = tracer.start_phase("Outer", "detail")
  tracer.log_inspection("node", "skipped")
  tracer.end_phase()
  tracer.end_phase()  # no active phase, ignored

  events = tracer.export()
  assert [e["type"] for e in events] == [
    TraceEventType.PHASE_START,
    TraceEventType.INSPECTION,
    TraceEventType.PHASE_END,
  ]
  assert events[1]["parent_id"] == outer
  assert events[0]["metadata"] == {"detail": "detail"}


def test_reset_tracer_replaces_instance():
  first = get_tracer()
  first.log_inspection("x", "noop")
  reset_tracer()
  assert get_tracer() is not first
  assert get_tracer().export() == []


def test_engine_trace_contents():
  """
  Scenario: Expanding a counter.
  Expectation: Macro match, import and rewrite events, all JSON serializable.
  """
  result = MacroEngine().run("let count = $signal(0);\ncount++;\n")
  events = result.trace_events

  matches = [e for e in events if e["type"] == TraceEventType.MACRO_MATCH]
  assert len(matches) == 1
  assert matches[0]["metadata"] == {"marker": "$signal", "binding": "count", "line": 1}

  imports = [e for e in events if e["type"] == TraceEventType.IMPORT_ACTION]
  assert imports[0]["metadata"] == {"module": "solid-js", "export": "createSignal", "local": "_signal"}

  rewrites = [e["metadata"] for e in events if e["type"] == TraceEventType.REWRITE]
  assert {"before": "count++", "after": "count[1](count[0]() + 1)"} in rewrites

  phases = [e["description"] for e in events if e["type"] == TraceEventType.PHASE_START]
  assert phases == ["Macro Expansion", "Parsing", "Scope Analysis", "Expansion"]

  json.dumps(events)
