"""
Type definitions for genoview

Feature record shapes delivered by data-source collaborators, plus common
aliases used across the package.
"""

from __future__ import annotations
from typing import TypedDict, Literal, List, Tuple, Union, Callable, Any, Dict
from pathlib import Path

# Type aliases
PathLike = Union[str, Path]
"""File path as string or Path object"""

Strand = Literal['+', '-']
"""Feature strand"""

JunctionStrand = Literal['+', '-', '.']
"""Junction strand ('.' when unstranded)"""

TrackKind = Literal['gene', 'mutation', 'signal', 'annotation', 'alignment',
                    'continuous_signal', 'junction']
"""Track variant tag"""

ExonType = Literal['exon', 'utr5', 'utr3', 'cds']
"""Exon sub-type"""

ConsequenceType = Literal['missense', 'nonsense', 'frameshift', 'splice', 'inframe_indel',
                          'synonymous', 'intron', 'utr', 'other']
"""Variant consequence class"""

SpliceMotif = Literal['GT-AG', 'GC-AG', 'AT-AC', 'other']
"""Splice-site dinucleotide motif"""

NovelJunctionType = Literal['exon_skip', 'alt_donor', 'alt_acceptor', 'novel_intron', 'novel_exon']
"""Kind of unannotated junction"""

TooltipFields = List[Tuple[str, str]]
"""Ordered key/value pairs handed to the tooltip formatter"""

FeatureCallback = Callable[[Any, float, float], None]
"""Hover/click callback: (feature, pixel_x, pixel_y)"""


# Feature records

class Exon(TypedDict):
    start: int
    end: int
    type: ExonType


class GeneFeature(TypedDict, total=False):
    """Gene model"""
    id: str
    symbol: str
    chromosome: str
    start: int
    end: int
    strand: Strand
    exons: List[Exon]


class MutationFeature(TypedDict, total=False):
    """Point mutation; start == position, end == position + 1"""
    id: str
    chromosome: str
    position: int
    start: int
    end: int
    ref: str
    alt: str
    gene: str
    aa_change: str
    consequence: ConsequenceType
    sample_count: int
    vaf: float


class SignalPoint(TypedDict):
    """Single coverage value at a position"""
    position: int
    value: float


class SignalTrackData(TypedDict):
    points: List[SignalPoint]
    min: float
    max: float


class AnnotationFeature(TypedDict, total=False):
    """Named genomic interval (enhancer, promoter, ...)"""
    id: str
    chromosome: str
    start: int
    end: int
    name: str
    type: str
    color: str


class AlignedRead(TypedDict, total=False):
    """Aligned sequencing read"""
    id: str
    chromosome: str
    start: int
    end: int
    strand: Strand
    mapq: int
    cigar: str
    flags: int
    mate_chromosome: str
    mate_start: int
    insert_size: int


class SignalBin(TypedDict):
    """Binned continuous signal value"""
    chromosome: str
    start: int
    end: int
    value: float


class SpliceJunction(TypedDict, total=False):
    """Splice junction from RNA-seq; start is the donor, end the acceptor"""
    id: str
    chromosome: str
    start: int
    end: int
    strand: JunctionStrand
    read_count: int
    unique_reads: int
    multi_map_reads: int
    motif: SpliceMotif
    is_annotated: bool
    gene_id: str
    gene_name: str
    novel_type: NovelJunctionType


class TrackStateEntry(TypedDict):
    """Shareable per-track display state"""
    id: str
    visible: bool
    collapsed: bool
    order: int


class BrowserState(TypedDict):
    """Shareable viewer state; persistence is the caller's concern"""
    chromosome: str
    start: int
    end: int
    tracks: List[TrackStateEntry]


Payload = Union[Dict[str, Any], List[Any]]
"""Track data payload as delivered by a data source"""
