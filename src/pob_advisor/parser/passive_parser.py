"""Passive tree extraction from the <Tree> section.

    <Tree activeSpec="1">
      <Spec treeVersion="3_25" nodes="1234,5678,...">
        <nodes><node>16226</node></nodes>
      </Spec>
    </Tree>

Allocated node ids come from the comma separated ``nodes`` attribute and
from nested <nodes>/<node> children, flattened across every <Spec> in
document order. Ids are matched against a keystone table handed in by
the caller; notables are not identified (no lookup table for them yet).
"""

from collections.abc import Mapping
from xml.etree.ElementTree import Element

from pob_advisor.models.build import Keystone, PassiveAllocation
from pob_advisor.parser.values import optional_text


def _spec_node_ids(spec: Element) -> list[str]:
    ids = [part.strip() for part in (spec.get("nodes") or "").split(",") if part.strip()]
    for container in spec:
        if container.tag.lower() != "nodes":
            continue
        for node in container:
            if node.tag.lower() != "node":
                continue
            node_id = optional_text(node.text) or optional_text(node.get("id"))
            if node_id is not None:
                ids.append(node_id)
    return ids


def _tree_version(section: Element) -> str:
    version = optional_text(section.get("version"))
    if version is not None:
        return version
    for spec in section.iter("Spec"):
        version = optional_text(spec.get("treeVersion"))
        if version is not None:
            return version
    return "unknown"


def parse_passives(
    section: Element | None,
    keystones: Mapping[str, Keystone],
) -> PassiveAllocation:
    if section is None:
        return PassiveAllocation()

    nodes: list[str] = []
    for spec in section.iter("Spec"):
        nodes.extend(_spec_node_ids(spec))

    return PassiveAllocation(
        nodes=tuple(nodes),
        keystones=tuple(keystones[n] for n in nodes if n in keystones),
        tree_version=_tree_version(section),
    )
