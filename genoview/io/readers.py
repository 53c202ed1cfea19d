"""
I/O Readers

Turn plain text tables into feature records for the track payloads.

Formats (tab-separated, '#' comment lines allowed):
    genes        id symbol chromosome start end strand exons
                 exons = 'start-end:type;start-end:type'
    mutations    id chromosome position ref alt gene aa_change consequence sample_count vaf
    annotations  BED: chrom start end name [score strand thickStart thickEnd itemRgb]
    signal       position value
    bins         bedGraph: chrom start end value
    reads        id chromosome start end strand mapq cigar flags [mate_chromosome mate_start insert_size]
    junctions    id chromosome start end strand read_count motif is_annotated [gene_name novel_type ...]
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Sequence
from pathlib import Path
import logging

import pandas as pd

from ..types import (
    AlignedRead,
    AnnotationFeature,
    Exon,
    GeneFeature,
    MutationFeature,
    PathLike,
    SignalBin,
    SignalTrackData,
    SpliceJunction,
)

logger = logging.getLogger(__name__)

BED_COLUMNS = ['chromosome', 'start', 'end', 'name', 'score', 'strand',
               'thick_start', 'thick_end', 'item_rgb']
BEDGRAPH_COLUMNS = ['chromosome', 'start', 'end', 'value']

_TRUE_VALUES = {'1', 'true', 'yes', 'y', 't'}


def read_table(filepath: PathLike, required: Sequence[str] = ()) -> pd.DataFrame:
    """
    Read a tab-separated table with a header row

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a required column is missing
    """
    if not Path(filepath).exists():
        raise FileNotFoundError(f"Input table not found: {filepath}")

    table = pd.read_csv(filepath, sep='\t', comment='#')
    missing = [column for column in required if column not in table.columns]
    if missing:
        raise ValueError(f"{filepath}: missing columns {missing}")

    logger.debug(f"Read {len(table)} rows from {filepath}")
    return table


def _records(table: pd.DataFrame, ints: Iterable[str] = (), floats: Iterable[str] = ()) -> List[Dict[str, Any]]:
    """DataFrame rows -> dicts with typed numbers and missing cells dropped"""
    records = []
    for row in table.to_dict('records'):
        record: Dict[str, Any] = {}
        for key, value in row.items():
            if pd.isna(value):
                continue
            if key in ints:
                value = int(value)
            elif key in floats:
                value = float(value)
            record[key] = value
        records.append(record)
    return records


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


def rgb_to_hex(item_rgb: str) -> Optional[str]:
    """BED itemRgb '255,0,128' -> '#ff0080'; None for '0' or malformed values"""
    parts = str(item_rgb).split(',')
    if len(parts) != 3:
        return None
    try:
        r, g, b = (int(p) for p in parts)
    except ValueError:
        return None
    return f"#{r:02x}{g:02x}{b:02x}"


def parse_exons(text: str) -> List[Exon]:
    """
    Parse 'start-end:type;start-end:type' into exon records

    The type defaults to 'exon' when omitted.
    """
    exons: List[Exon] = []
    for chunk in str(text).split(';'):
        chunk = chunk.strip()
        if not chunk:
            continue
        span, _, exon_type = chunk.partition(':')
        start, _, end = span.partition('-')
        exons.append({'start': int(start), 'end': int(end), 'type': exon_type or 'exon'})
    return exons


class GeneReader:
    """Reads gene models"""

    @staticmethod
    def read(filepath: PathLike) -> List[GeneFeature]:
        table = read_table(filepath, required=['id', 'chromosome', 'start', 'end'])
        genes: List[GeneFeature] = []
        for record in _records(table, ints=('start', 'end')):
            record['exons'] = parse_exons(record.get('exons', ''))
            record.setdefault('symbol', record['id'])
            record.setdefault('strand', '+')
            genes.append(record)  # type: ignore
        logger.info(f"Loaded {len(genes)} genes from {filepath}")
        return genes


class MutationReader:
    """Reads point mutations"""

    @staticmethod
    def read(filepath: PathLike) -> List[MutationFeature]:
        table = read_table(filepath, required=['id', 'chromosome', 'position'])
        mutations: List[MutationFeature] = []
        for record in _records(table, ints=('position', 'sample_count'), floats=('vaf',)):
            record['start'] = record['position']
            record['end'] = record['position'] + 1
            record.setdefault('consequence', 'other')
            record.setdefault('sample_count', 1)
            mutations.append(record)  # type: ignore
        logger.info(f"Loaded {len(mutations)} mutations from {filepath}")
        return mutations


class AnnotationReader:
    """Reads region annotations from BED files"""

    @staticmethod
    def read(filepath: PathLike) -> List[AnnotationFeature]:
        """
        Load annotations from a headerless BED file

        Only the first three columns are required; name defaults to
        chrom:start-end, itemRgb becomes the bar color.
        """
        if not Path(filepath).exists():
            raise FileNotFoundError(f"BED file not found: {filepath}")

        bed = pd.read_csv(filepath, sep='\t', header=None, comment='#')
        if bed.shape[1] < 3:
            raise ValueError(f"{filepath}: BED needs at least 3 columns, found {bed.shape[1]}")
        bed = bed.iloc[:, :len(BED_COLUMNS)].copy()
        bed.columns = BED_COLUMNS[:bed.shape[1]]

        annotations: List[AnnotationFeature] = []
        for index, record in enumerate(_records(bed, ints=('start', 'end'))):
            name = str(record.get('name', f"{record['chromosome']}:{record['start']}-{record['end']}"))
            annotation: AnnotationFeature = {
                'id': f"{name}_{index}",
                'chromosome': record['chromosome'],
                'start': record['start'],
                'end': record['end'],
                'name': name,
                'type': 'region',
            }
            color = rgb_to_hex(record.get('item_rgb', ''))
            if color:
                annotation['color'] = color
            annotations.append(annotation)
        logger.info(f"Loaded {len(annotations)} annotations from {filepath}")
        return annotations


class SignalReader:
    """Reads point signal values"""

    @staticmethod
    def read(filepath: PathLike) -> SignalTrackData:
        table = read_table(filepath, required=['position', 'value'])
        points = [{'position': int(p), 'value': float(v)}
                  for p, v in zip(table['position'], table['value'])]
        values = table['value']
        return {
            'points': points,  # type: ignore
            'min': float(values.min()) if len(values) else 0.0,
            'max': float(values.max()) if len(values) else 0.0,
        }


class BedGraphReader:
    """Reads binned signal from bedGraph files"""

    @staticmethod
    def read(filepath: PathLike) -> List[SignalBin]:
        if not Path(filepath).exists():
            raise FileNotFoundError(f"bedGraph file not found: {filepath}")
        table = pd.read_csv(filepath, sep='\t', header=None, comment='#',
                            names=BEDGRAPH_COLUMNS, usecols=range(4))
        # track/browser header lines of UCSC files
        table = table[~table['chromosome'].astype(str).str.startswith(('track', 'browser'))]
        bins = _records(table, ints=('start', 'end'), floats=('value',))
        logger.info(f"Loaded {len(bins)} signal bins from {filepath}")
        return bins  # type: ignore


class ReadTableReader:
    """Reads aligned reads exported as a table"""

    @staticmethod
    def read(filepath: PathLike) -> List[AlignedRead]:
        table = read_table(filepath, required=['id', 'chromosome', 'start', 'end'])
        reads = _records(table, ints=('start', 'end', 'mapq', 'flags', 'mate_start', 'insert_size'))
        for read in reads:
            read.setdefault('strand', '+')
            read.setdefault('mapq', 60)
            read.setdefault('flags', 0)
            read.setdefault('cigar', f"{read['end'] - read['start']}M")
        logger.info(f"Loaded {len(reads)} reads from {filepath}")
        return reads  # type: ignore


class JunctionReader:
    """Reads splice junctions"""

    @staticmethod
    def read(filepath: PathLike) -> List[SpliceJunction]:
        table = read_table(filepath, required=['id', 'chromosome', 'start', 'end'])
        junctions = _records(table, ints=('start', 'end', 'read_count', 'unique_reads', 'multi_map_reads'))
        for junction in junctions:
            junction['is_annotated'] = _as_bool(junction.get('is_annotated', False))
            junction.setdefault('strand', '.')
            junction.setdefault('read_count', 0)
            junction.setdefault('motif', 'other')
        logger.info(f"Loaded {len(junctions)} junctions from {filepath}")
        return junctions  # type: ignore
