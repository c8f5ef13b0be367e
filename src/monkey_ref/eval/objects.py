from __future__ import annotations

from typing import Callable, Dict

from ..runtime import (
    Frame,
    HashKey,
    HashPair,
    MkError,
    MkHash,
    MkValue,
    NULL,
    hash_key_of,
    is_error,
)
from ..tree import HashLiteral, Node

EvalFunc = Callable[[Node, Frame], MkValue]

def eval_hash_literal(node: HashLiteral, frame: Frame, eval_func: EvalFunc) -> MkValue:
    pairs: Dict[HashKey, HashPair] = {}

    for key_node, value_node in node.pairs:
        key = eval_func(key_node, frame)
        if is_error(key):
            return key

        hashed = hash_key_of(key)
        if isinstance(hashed, MkError):
            return hashed

        val = eval_func(value_node, frame)
        if is_error(val):
            return val

        pairs[hashed] = HashPair(key=key, value=val)

    return MkHash(pairs)

def hash_get(obj: MkHash, key: MkValue) -> MkValue:
    hashed = hash_key_of(key)

    if isinstance(hashed, MkError):
        return hashed

    pair = obj.pairs.get(hashed)

    return pair.value if pair is not None else NULL
