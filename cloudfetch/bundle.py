import json
from pathlib import Path
from typing import Any, Dict, Iterable

from .constants import NODES_FILE, RELATIONS_FILE
from .graph import Graph


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def write_jsonl(records: Iterable[Dict[str, Any]], path: Path) -> Path:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        for rec in records:
            f.write(json.dumps(rec))
            f.write("\n")
    return path


def write_graph(graph: Graph, output_dir: Path) -> Dict[str, Path]:
    """Write nodes and relations as two JSONL files under ``output_dir``."""
    data = graph.to_dict()
    return {
        "nodes": write_jsonl(data["nodes"], output_dir / NODES_FILE),
        "relations": write_jsonl(data["relations"], output_dir / RELATIONS_FILE),
    }
