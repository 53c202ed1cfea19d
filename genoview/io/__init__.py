"""I/O utilities for genoview"""

from .readers import (
    read_table,
    parse_exons,
    rgb_to_hex,
    GeneReader,
    MutationReader,
    AnnotationReader,
    SignalReader,
    BedGraphReader,
    ReadTableReader,
    JunctionReader,
)
from .writers import DrawCommandWriter, read_commands

__all__ = [
    'read_table', 'parse_exons', 'rgb_to_hex',
    'GeneReader', 'MutationReader', 'AnnotationReader',
    'SignalReader', 'BedGraphReader', 'ReadTableReader', 'JunctionReader',
    'DrawCommandWriter', 'read_commands',
]
