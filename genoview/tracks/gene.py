"""
Gene track

Gene models packed into non-overlapping rows: intron line, strand chevrons,
exon rectangles colored by exon type, and a symbol label with strand glyph.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging

from ..config import GeneTrackConfig
from ..layout.packer import IntervalPacker
from ..layout.types import DrawCommand, HitBox, PackInterval
from ..types import Exon, GeneFeature, Payload, TooltipFields
from ..utils import overlaps
from .base import RenderContext, Track

logger = logging.getLogger(__name__)

EXON_COLORS: Dict[str, str] = {
    'cds': '#1976D2',
    'utr5': '#64B5F6',
    'utr3': '#64B5F6',
    'exon': '#42A5F5',
}

INTRON_COLOR = '#666'
ARROW_COLOR = '#999'
LABEL_COLOR = '#333'


class GeneTrack(Track):
    """
    Gene structures with exons, introns and strand direction

    hit_test returns the gene record under the pointer; exon_at resolves the
    exon at the same point.
    """

    kind = 'gene'
    config_class = GeneTrackConfig
    empty_message = 'No genes in this region'

    def parse(self, payload: Payload) -> List[GeneFeature]:
        genes = payload.get('genes', []) if isinstance(payload, dict) else payload
        return list(genes)

    def visible_features(self, context: RenderContext) -> List[GeneFeature]:
        region = context.region
        return [
            g for g in self.data
            if g.get('chromosome', region.chromosome) == region.chromosome
            and overlaps(g['start'], g['end'], region.start, region.end)
        ]

    @property
    def row_height(self) -> float:
        return self.config.exon_height + self.config.row_spacing

    def max_rows(self) -> int:
        """Configured row limit, or as many rows as fit into the track height"""
        if self.config.max_rows:
            return self.config.max_rows
        return max(1, int((self.config.height - self.config.top_padding) // self.row_height))

    def layout_content(self, context: RenderContext) -> List[DrawCommand]:
        cfg = self.config
        genes = self.visible_features(context)

        packer = IntervalPacker(min_gap=cfg.gene_padding, max_rows=self.max_rows())
        result = packer.pack(
            PackInterval(key=i, start=context.to_pixel(g['start']), end=context.to_pixel(g['end']))
            for i, g in enumerate(genes)
        )

        commands: List[DrawCommand] = []
        for index, gene in enumerate(genes):
            row = result.rows.get(index)
            if row is None:
                continue
            y = cfg.top_padding + row * self.row_height
            commands.extend(self._gene_commands(context, gene, y))

        if result.has_overflow:
            commands.append(self._report_overflow(context, result.overflow_count, self.max_rows()))

        return commands

    def _gene_commands(self, context: RenderContext, gene: GeneFeature, y: float) -> List[DrawCommand]:
        cfg = self.config
        start_x = context.to_pixel(gene['start'])
        end_x = context.to_pixel(gene['end'])
        center_y = y + cfg.exon_height / 2
        line_start = max(0.0, start_x)
        line_end = min(context.width, end_x)

        commands = [DrawCommand(
            kind='line', x=line_start, y=center_y, x2=line_end, y2=center_y,
            stroke=INTRON_COLOR, stroke_width=cfg.intron_height,
            feature_id=gene['id'], role='intron',
        )]
        commands.extend(self._strand_arrows(gene, line_start, line_end, center_y))

        self._add_hit(HitBox(line_start, y, max(line_start, line_end), y + cfg.exon_height,
                             feature=gene))

        for exon in gene.get('exons', []):
            exon_start = context.to_pixel(exon['start'])
            exon_end = context.to_pixel(exon['end'])
            if exon_end < 0 or exon_start > context.width:
                continue
            x = max(0.0, exon_start)
            width = max(cfg.min_exon_width, exon_end - exon_start)
            commands.append(DrawCommand(
                kind='rect', x=x, y=y, width=width, height=cfg.exon_height,
                color=EXON_COLORS.get(exon.get('type', 'exon'), EXON_COLORS['exon']),
                feature_id=gene['id'], role='exon',
            ))
            self._add_hit(HitBox(x, y, x + width, y + cfg.exon_height,
                                 feature=gene, params=(exon,)))

        if cfg.show_labels:
            label_x = max(5.0, start_x)
            symbol = gene.get('symbol', gene['id'])
            commands.append(DrawCommand(
                kind='text', x=label_x, y=y - 4, text=symbol, color=LABEL_COLOR,
                font_size=12.0, bold=True, feature_id=gene['id'], role='label',
            ))
            commands.append(DrawCommand(
                kind='text', x=label_x + len(symbol) * 8 + 5, y=y - 4,
                text='→' if gene.get('strand') == '+' else '←',
                color=INTRON_COLOR, font_size=10.0, feature_id=gene['id'], role='strand',
            ))

        return commands

    def _strand_arrows(self, gene: GeneFeature, start_x: float, end_x: float,
                       center_y: float) -> List[DrawCommand]:
        """Chevrons every arrow_spacing px along the intron line"""
        cfg = self.config
        direction = 1 if gene.get('strand') == '+' else -1
        size = cfg.arrow_size
        arrows: List[DrawCommand] = []

        x = start_x + cfg.arrow_spacing
        while x < end_x - 10:
            arrows.append(DrawCommand(
                kind='polyline',
                points=((x - size * direction, center_y - size),
                        (x, center_y),
                        (x - size * direction, center_y + size)),
                stroke=ARROW_COLOR, stroke_width=1.5,
                feature_id=gene['id'], role='strand-arrow',
            ))
            x += cfg.arrow_spacing
        return arrows

    def exon_at(self, px: float, py: float) -> Optional[Exon]:
        """Exon drawn under a track-local pixel, or None"""
        for box in reversed(self._hits):
            if box.params and box.contains(px, py):
                return box.params[0]
        return None

    def tooltip_fields(self, feature: Any, exon: Optional[Exon] = None) -> TooltipFields:
        gene = feature
        fields = [
            ('Gene', gene.get('symbol', '')),
            ('ID', gene['id']),
            ('Location', f"{gene['chromosome']}:{gene['start']:,}-{gene['end']:,}"),
            ('Strand', 'Forward (+)' if gene.get('strand') == '+' else 'Reverse (-)'),
            ('Exons', str(len(gene.get('exons', [])))),
        ]
        if exon:
            fields.append(('Exon Type', exon.get('type', 'exon').upper()))
        return fields
