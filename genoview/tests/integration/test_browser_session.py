"""
genoview Integration Tests

Runs the layout, plot and ticks subcommands programmatically on a small TP53
dataset covering every track kind.

Run: pytest genoview/tests/integration/ -v
"""
from argparse import Namespace

import matplotlib
matplotlib.use('Agg')

import pytest

from genoview.cli import layout, plot, ticks
from genoview.cli.common import build_session
from genoview.io import read_commands
from genoview.tracks import TrackState
from genoview.viewport import GenomicRegion


TRACK_IDS = ['genes', 'mutations', 'coverage', 'annotations', 'reads', 'bins', 'junctions']


@pytest.fixture
def inputs(fixtures_dir):
    """One small input file per track kind, all on the TP53 locus"""
    files = {
        'genes': ('genes.tsv', [
            'id\tsymbol\tchromosome\tstart\tend\tstrand\texons',
            'ENSG00000141510\tTP53\tchr17\t7668402\t7687550\t-\t'
            '7668402-7669690:utr3;7670609-7670715:cds;7673535-7673608:cds;7687377-7687550:utr5',
            'ENSG00000129244\tATP1B2\tchr17\t7645000\t7672000\t+\t7671000-7671500:cds',
        ]),
        'mutations': ('mutations.tsv', [
            'id\tchromosome\tposition\tref\talt\tgene\taa_change\tconsequence\tsample_count\tvaf',
            'm1\tchr17\t7675088\tC\tT\tTP53\tR175H\tmissense\t42\t0.31',
            'm2\tchr17\t7675094\tG\tA\tTP53\tR173C\tmissense\t3\t0.12',
            'm3\tchr17\t7674220\tG\tA\tTP53\tR248Q\tnonsense\t17\t0.44',
        ]),
        'signal': ('signal.tsv', ['position\tvalue'] + [
            f"{7668402 + 1000 * i}\t{(i * 37) % 50}" for i in range(20)
        ]),
        'annotations': ('regions.bed', [
            'chr17\t7687000\t7688500\tPromoter_P1\t0\t-\t7687000\t7688500\t255,0,128',
            'chr17\t7676000\t7676800\tEnhancer_E1',
        ]),
        'reads': ('reads.tsv', ['id\tchromosome\tstart\tend\tstrand\tmapq\tcigar\tflags'] + [
            f"r{i}\tchr17\t{7674000 + 40 * i}\t{7674100 + 40 * i}\t{'+-'[i % 2]}\t60\t100M\t{99 if i % 2 == 0 else 147}"
            for i in range(30)
        ]),
        'bins': ('signal.bedGraph', ['track type=bedGraph name=H3K27ac'] + [
            f"chr17\t{7668000 + 500 * i}\t{7668500 + 500 * i}\t{1 + (i % 7)}" for i in range(40)
        ]),
        'junctions': ('junctions.tsv', [
            'id\tchromosome\tstart\tend\tstrand\tread_count\tmotif\tis_annotated\tnovel_type',
            'j1\tchr17\t7669690\t7670609\t-\t120\tGT-AG\ttrue\t',
            'j2\tchr17\t7670715\t7673535\t-\t8\tGC-AG\tfalse\texon_skip',
            'j3\tchr17\t7673608\t7674181\t+\t2\tGT-AG\ttrue\t',
        ]),
    }
    paths = {}
    for dest, (name, lines) in files.items():
        path = fixtures_dir / name
        path.write_text('\n'.join(lines) + '\n')
        paths[dest] = str(path)
    return paths


def _args(inputs, **overrides):
    """Namespace matching what argparse would create for layout/plot"""
    values = dict(
        region='chr17:7,668,402-7,687,550',
        width=1000,
        preset='default',
        zoom=1.0,
        pan=0.0,
        collapse=[],
        hide=[],
        order=None,
        debug=False,
        **inputs,
    )
    values.update(overrides)
    return Namespace(**values)


@pytest.mark.integration
class TestBuildSession:
    """Session assembly from CLI arguments"""

    def test_all_tracks_loaded(self, inputs):
        session = build_session(_args(inputs))
        assert [t.id for t in session.composer.track_list()] == TRACK_IDS
        assert all(t.state is TrackState.DATA_LOADED for t in session.composer.track_list())
        assert session.viewport.region == GenomicRegion('chr17', 7668402, 7687550)

    def test_every_visible_track_draws_content(self, inputs):
        """No track falls back to its empty message on the TP53 locus"""
        session = build_session(_args(inputs))
        frame = session.composer.layout(session.viewport)
        for track_frame in frame.tracks:
            roles = {c.role for c in track_frame.commands}
            assert 'empty' not in roles, track_frame.track_id

    def test_view_options(self, inputs):
        session = build_session(_args(inputs, order=['junctions', 'genes'], collapse=['reads'],
                                      hide=['bins'], zoom=2.0))
        ids = [t.id for t in session.composer.track_list()]
        assert ids[:2] == ['junctions', 'genes']
        assert session.composer.get_track('reads').collapsed
        assert not session.composer.get_track('bins').visible
        assert session.viewport.region == GenomicRegion('chr17', 7673189, 7682763)

    def test_no_inputs_draws_ruler_only(self):
        session = build_session(Namespace(region=None, width=None, preset='compact', zoom=1.0, pan=0.0,
                                          collapse=[], hide=[], order=None))
        frame = session.composer.layout(session.viewport)
        assert frame.tracks == ()
        assert any(c.role == 'region-label' for c in frame.ruler)


@pytest.mark.integration
class TestLayoutCommand:
    """layout subcommand"""

    def test_writes_draw_commands(self, inputs, tmp_path):
        output = tmp_path / 'tp53_commands.tsv'
        layout.run(_args(inputs, output=str(output), precision=2))

        table = read_commands(output)
        assert set(table['layer']) == {'ruler', *TRACK_IDS}
        assert (table['role'] == 'major-tick').sum() == 19
        assert 'wedge' in set(table['kind'])
        assert 'R248Q' in set(table['text'].dropna())


@pytest.mark.integration
@pytest.mark.rendering
class TestPlotCommand:
    """plot subcommand"""

    def test_writes_png(self, inputs, tmp_path):
        output = tmp_path / 'plots' / 'tp53.png'
        plot.run(_args(inputs, output=str(output), dpi=None))
        assert output.exists()
        assert output.stat().st_size > 0

    def test_presentation_preset(self, inputs, tmp_path):
        output = tmp_path / 'tp53.svg'
        plot.run(_args(inputs, output=str(output), dpi=72, preset='presentation', width=None))
        assert output.read_text().lstrip().startswith('<?xml')


@pytest.mark.integration
class TestTicksCommand:
    """ticks subcommand"""

    def test_tick_table(self):
        table = ticks.tick_table(GenomicRegion('chr17', 7668402, 7687550), 10, 1000)
        majors = table[table['major']]
        assert len(majors) == 19
        assert majors['label'].iloc[0] == '7.67M'

    def test_prints_tsv(self, capsys):
        ticks.run(Namespace(region='chr17:7668402-7687550', target=10, width=1000,
                            major_only=True, debug=False))
        lines = capsys.readouterr().out.strip().splitlines()
        assert lines[0] == 'position\tpixel\tlabel\tmajor'
        assert len(lines) == 1 + 19
