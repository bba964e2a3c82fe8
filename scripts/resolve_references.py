"""CLI for resolving the references of a canonical string against a local note graph"""

import argparse
import asyncio
from pathlib import Path

from refchat.config import settings
from refchat.graph.local_graph import LocalGraph
from refchat.serialization.references import deserialize, serialize


async def main(text: str, graph_path: str) -> None:
    graph = LocalGraph(filepath=graph_path)
    document = await deserialize(text, graph)

    print(document.model_dump_json(indent=2))
    print(serialize(document))


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", type=str, help="Canonical string with ((uid)) and [[Page]] markers")
    source.add_argument("--in-file", type=str, help="File containing a canonical string")
    parser.add_argument(
        "--graph",
        type=str,
        required=False,
        help="Local note graph file",
        default=settings.local_graph_path,
    )

    args = parser.parse_args()
    text = args.text if args.text is not None else Path(args.in_file).read_text()

    asyncio.run(main(text=text, graph_path=args.graph))
