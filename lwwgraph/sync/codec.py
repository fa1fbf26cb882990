"""
JSON encoding of LWW graph state for shipping between replicas.

Format:
    {
        "version": 1,
        "vertices": {"add": [[vertex, ts], ...], "remove": [[vertex, ts], ...]},
        "edges": [[source, {"add": [...], "remove": [...]}], ...]
    }

Maps are written as pair lists since JSON object keys must be strings.
"""

import hashlib
import json
import logging
from typing import Any, Dict, List

from ..crdt import LWWGraph, LWWSet
from ..errors import CodecError
from .clock import Timestamp

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def _to_json(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_to_json(item) for item in value]
    return value


def _from_json(value: Any) -> Any:
    """Lists come back as tuples so they stay hashable and ordered."""
    if isinstance(value, list):
        if (len(value) == 2 and isinstance(value[0], int)
                and not isinstance(value[0], bool) and isinstance(value[1], str)):
            return Timestamp(value[0], value[1])
        return tuple(_from_json(item) for item in value)
    return value


def _encode_set(lww_set: LWWSet) -> Dict[str, List]:
    return {
        "add": [[_to_json(e), _to_json(t)] for e, t in lww_set.add_map().items()],
        "remove": [[_to_json(e), _to_json(t)] for e, t in lww_set.remove_map().items()],
    }


def _decode_pairs(entries: Any, apply):
    if not isinstance(entries, list):
        raise CodecError(f"Expected a list of [element, timestamp] pairs, got {type(entries).__name__}")
    for entry in entries:
        if not isinstance(entry, list) or len(entry) != 2:
            raise CodecError(f"Malformed set entry: {entry!r}")
        element, timestamp = entry
        try:
            apply(_from_json(element), _from_json(timestamp))
        except TypeError as e:
            raise CodecError(f"Malformed set entry {entry!r}: {e}") from e


def _decode_set(data: Any) -> LWWSet:
    if not isinstance(data, dict):
        raise CodecError(f"Expected set object, got {type(data).__name__}")
    lww_set = LWWSet()
    _decode_pairs(data.get("add", []), lww_set.add)
    _decode_pairs(data.get("remove", []), lww_set.remove)
    return lww_set


def encode_state(graph: LWWGraph) -> Dict[str, Any]:
    """Encode graph state as a JSON-compatible dict."""
    return {
        "version": FORMAT_VERSION,
        "vertices": _encode_set(graph.vertex_set()),
        "edges": [
            [_to_json(source), _encode_set(edge_set)]
            for source, edge_set in graph.edge_sets().items()
        ],
    }


def decode_state(data: Dict[str, Any]) -> LWWGraph:
    """
    Decode graph state produced by encode_state.

    Raises:
        CodecError: if the payload is malformed or of an unknown version
    """
    if not isinstance(data, dict):
        raise CodecError(f"Expected state object, got {type(data).__name__}")
    version = data.get("version")
    if version != FORMAT_VERSION:
        raise CodecError(f"Unsupported state version: {version!r}")

    graph = LWWGraph()
    graph.merge_vertex_set(_decode_set(data.get("vertices", {})))

    edges = data.get("edges", [])
    if not isinstance(edges, list):
        raise CodecError("Edges must be a list of [source, set] pairs")
    for entry in edges:
        if not isinstance(entry, list) or len(entry) != 2:
            raise CodecError(f"Malformed edge entry: {entry!r}")
        source, encoded = entry
        edge_set = _decode_set(encoded)
        try:
            graph.merge_edge_set(_from_json(source), edge_set)
        except TypeError as e:
            raise CodecError(f"Malformed edge source {source!r}: {e}") from e
    return graph


def dumps(graph: LWWGraph) -> bytes:
    """Serialize graph state to UTF-8 JSON."""
    return json.dumps(encode_state(graph)).encode("utf-8")


def loads(data: bytes) -> LWWGraph:
    """Deserialize graph state from UTF-8 JSON."""
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CodecError(f"Invalid state payload: {e}") from e
    return decode_state(payload)


def _canonical(encoded_set: Dict[str, List]) -> Dict[str, List]:
    return {key: sorted(pairs, key=json.dumps) for key, pairs in encoded_set.items()}


def state_digest(graph: LWWGraph) -> str:
    """
    Fingerprint of the raw replica state.

    Independent of insertion order, so two converged replicas report the
    same digest.
    """
    state = encode_state(graph)
    canonical = {
        "vertices": _canonical(state["vertices"]),
        "edges": sorted(
            ([source, _canonical(encoded)] for source, encoded in state["edges"]),
            key=lambda entry: json.dumps(entry[0]),
        ),
    }
    digest = hashlib.sha256(json.dumps(canonical, sort_keys=True).encode()).hexdigest()
    logger.debug("State digest %s", digest[:16])
    return digest
