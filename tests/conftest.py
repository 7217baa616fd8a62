"""Pytest configuration for bpmn-diff tests."""

import sys
from pathlib import Path

import pytest

# Add the project root to the path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from bpmn_diff.core.observability import LogLevel, ObservabilityConfig, ObservabilityManager  # noqa: E402

DEFINITIONS_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<bpmn:definitions xmlns:bpmn="http://www.omg.org/spec/BPMN/20100524/MODEL"
                  xmlns:bpmndi="http://www.omg.org/spec/BPMN/20100524/DI"
                  xmlns:dc="http://www.omg.org/spec/DD/20100524/DC"
                  xmlns:di="http://www.omg.org/spec/DD/20100524/DI"
                  xmlns:camunda="http://camunda.org/schema/1.0/bpmn"
                  id="Definitions_1"
                  targetNamespace="http://bpmn.io/schema/bpmn">
  <bpmn:process id="Process_1" isExecutable="true">
{body}
  </bpmn:process>
  <bpmndi:BPMNDiagram id="BPMNDiagram_1">
    <bpmndi:BPMNPlane id="BPMNPlane_1" bpmnElement="Process_1">
{shapes}
    </bpmndi:BPMNPlane>
  </bpmndi:BPMNDiagram>
</bpmn:definitions>
"""


@pytest.fixture(autouse=True, scope="session")
def quiet_observability():
    """Initialize observability once with warnings-only logging."""
    ObservabilityManager.reset()
    ObservabilityManager.initialize(
        ObservabilityConfig(log_level=LogLevel.WARNING, enable_tracing=True)
    )
    yield
    ObservabilityManager.reset()


@pytest.fixture
def make_bpmn():
    """Factory wrapping process body XML into a full BPMN document."""

    def _make(body: str, shapes: str = "") -> str:
        return DEFINITIONS_TEMPLATE.format(body=body, shapes=shapes)

    return _make


# ===========================
# Sample Documents
# ===========================

ORIGINAL_BODY = """
    <bpmn:startEvent id="Start_1" name="Order received">
      <bpmn:outgoing>Flow_1</bpmn:outgoing>
    </bpmn:startEvent>
    <bpmn:userTask id="T1" name="Review" camunda:assignee="alice">
      <bpmn:extensionElements>
        <camunda:taskListener class="com.example.ReviewListener" event="create" />
      </bpmn:extensionElements>
      <bpmn:incoming>Flow_1</bpmn:incoming>
      <bpmn:outgoing>Flow_2</bpmn:outgoing>
    </bpmn:userTask>
    <bpmn:serviceTask id="T2" name="Archive" camunda:class="com.example.Archive">
      <bpmn:incoming>Flow_2</bpmn:incoming>
      <bpmn:outgoing>Flow_3</bpmn:outgoing>
    </bpmn:serviceTask>
    <bpmn:endEvent id="End_1" name="Done">
      <bpmn:incoming>Flow_3</bpmn:incoming>
    </bpmn:endEvent>
    <bpmn:sequenceFlow id="Flow_1" sourceRef="Start_1" targetRef="T1" />
    <bpmn:sequenceFlow id="Flow_2" sourceRef="T1" targetRef="T2" />
    <bpmn:sequenceFlow id="Flow_3" sourceRef="T2" targetRef="End_1" />
"""

ORIGINAL_SHAPES = """
      <bpmndi:BPMNShape id="T1_di" bpmnElement="T1">
        <dc:Bounds x="270" y="77" width="100" height="80" />
      </bpmndi:BPMNShape>
"""

CHANGED_BODY = """
    <bpmn:startEvent id="Start_1" name="Order received">
      <bpmn:outgoing>Flow_1</bpmn:outgoing>
    </bpmn:startEvent>
    <bpmn:userTask id="T1" name="Approve" camunda:assignee="bob">
      <bpmn:extensionElements>
        <camunda:taskListener class="com.example.ApproveListener" event="create" />
      </bpmn:extensionElements>
      <bpmn:incoming>Flow_1</bpmn:incoming>
      <bpmn:outgoing>Flow_4</bpmn:outgoing>
    </bpmn:userTask>
    <bpmn:scriptTask id="T3" name="Notify" scriptFormat="groovy">
      <bpmn:incoming>Flow_4</bpmn:incoming>
      <bpmn:outgoing>Flow_5</bpmn:outgoing>
    </bpmn:scriptTask>
    <bpmn:endEvent id="End_1" name="Done">
      <bpmn:incoming>Flow_5</bpmn:incoming>
    </bpmn:endEvent>
    <bpmn:sequenceFlow id="Flow_1" sourceRef="Start_1" targetRef="T1" />
    <bpmn:sequenceFlow id="Flow_4" sourceRef="T1" targetRef="T3" />
    <bpmn:sequenceFlow id="Flow_5" sourceRef="T3" targetRef="End_1" />
"""

CHANGED_SHAPES = """
      <bpmndi:BPMNShape id="T1_di" bpmnElement="T1">
        <dc:Bounds x="400" y="200" width="120" height="90" />
      </bpmndi:BPMNShape>
"""


@pytest.fixture
def original_xml(make_bpmn):
    """Order process: Start -> Review -> Archive -> End."""
    return make_bpmn(ORIGINAL_BODY, ORIGINAL_SHAPES)


@pytest.fixture
def changed_xml(make_bpmn):
    """Order process: Start -> Approve -> Notify -> End, with T1 moved on the canvas."""
    return make_bpmn(CHANGED_BODY, CHANGED_SHAPES)


@pytest.fixture
def bpmn_files(tmp_path, original_xml, changed_xml):
    """Both sample documents written to disk."""
    path1 = tmp_path / "order_v1.bpmn"
    path2 = tmp_path / "order_v2.bpmn"
    path1.write_text(original_xml, encoding="utf-8")
    path2.write_text(changed_xml, encoding="utf-8")
    return path1, path2
