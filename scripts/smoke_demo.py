from __future__ import annotations

import argparse
from pathlib import Path

from adapters.filesystem.scene_graph_repository import FileSystemSceneGraphRepository
from adapters.memory.scene_graph import InMemorySceneGraph
from app.config import load_settings
from domain.models import MarkerKind, PrimitiveBatch
from domain.services.build_scene_markers import SceneMarkerBuilder


def check_batches(scene_path: Path, batches: list[PrimitiveBatch]) -> None:
    if not batches:
        raise RuntimeError(f"{scene_path.name}: no batches built")

    keys = [batch.key for batch in batches]
    if len(keys) != len(set(keys)):
        raise RuntimeError(f"{scene_path.name}: duplicate namespace/id pairs")

    for batch in batches:
        if batch.kind == MarkerKind.LINE_LIST and len(batch.points) % 2:
            raise RuntimeError(f"{scene_path.name}: odd line list in {batch.namespace}")
        if len(batch.colors) not in {0, 1, len(batch.points)}:
            raise RuntimeError(f"{scene_path.name}: color count mismatch in {batch.namespace}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Build markers for every example scene.")
    parser.add_argument("--scenes", type=Path, default=Path("examples/scenes"))
    parser.add_argument("--config", type=Path, default=None)
    args = parser.parse_args()

    settings = load_settings(args.config).markers
    documents = FileSystemSceneGraphRepository().load_all_with_paths(args.scenes)
    if not documents:
        raise RuntimeError(f"No scenes found in {args.scenes}")

    for scene_path, document in documents:
        builder = SceneMarkerBuilder(
            visualizer_config=settings.visualizer,
            layer_configs=settings.layers,
            dynamic_configs=settings.dynamic_layers,
            colormap=settings.colormap,
            label_names=settings.label_lookup(),
        )
        batches = builder.build(InMemorySceneGraph.from_document(document), settings.header())
        check_batches(scene_path, batches)
        print(f"{scene_path.name}: {len(batches)} batches")

    print("Smoke test passed.")


if __name__ == "__main__":
    main()
