"""节点名称生成。"""
from __future__ import annotations

import random

_ADJECTIVES = (
    "amber", "bold", "brisk", "calm", "clever", "crimson", "dawn", "eager",
    "fading", "gentle", "golden", "hidden", "icy", "jolly", "lively", "lunar",
    "misty", "noble", "proud", "quiet", "rapid", "rustic", "silent", "steady",
    "swift", "tidal", "velvet", "wild",
)
_NOUNS = (
    "badger", "breeze", "canyon", "cedar", "comet", "falcon", "fjord", "forest",
    "glacier", "harbor", "heron", "island", "lynx", "meadow", "otter", "peak",
    "pine", "raven", "ridge", "river", "spruce", "storm", "summit", "thicket",
    "valley", "willow", "wolf",
)


def generate_name() -> str:
    return f"{random.choice(_ADJECTIVES)}-{random.choice(_NOUNS)}-{random.randint(1000, 9999)}"
