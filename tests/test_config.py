import logging

import pytest
import yaml

from seqalign import (
    AffineGapAligner,
    AffineGapCost,
    AlignmentMode,
    ConfigLoader,
    ConfigurationError,
    LinearGapAligner,
    RepeatAligner,
    ScoreMatrix,
    SpaceReducedAligner,
    align,
    align_score_only,
    make_aligner,
    setup_logging,
)
from seqalign.config import (
    DEFAULT_CONFIG_PATH,
    as_config_loader,
    gap_cost_from_config,
    reload_config,
    score_model_from_config,
)
from seqalign.core.gaps import LinearGapCost

NUC = ScoreMatrix.nucleotide(5, -4)


def write_config(path, document):
    path.write_text(yaml.safe_dump(document))
    return str(path)


def test_packaged_defaults_load():
    """The shipped YAML parses and matches the built-in defaults."""
    assert DEFAULT_CONFIG_PATH.exists()
    loader = ConfigLoader()
    assert loader.config == loader._get_default_config()


def test_missing_file_falls_back_to_defaults(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger='seqalign'):
        loader = ConfigLoader(str(tmp_path / "missing.yaml"))
    assert loader.get_alignment_params()['mode'] == 'global'
    assert "not found" in caplog.text


def test_partial_file_is_merged(tmp_path):
    path = write_config(tmp_path / "config.yaml", {'alignment': {'mode': 'local', 'gap_cost': 2}})
    loader = ConfigLoader(path)

    assert loader.get_alignment_params()['mode'] == 'local'
    assert loader.get_alignment_params()['gap_cost'] == 2
    assert loader.get_alignment_params()['gap_model'] == 'linear'
    assert loader.get_scoring_params()['type'] == 'nucleotide'


def test_empty_file_uses_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert ConfigLoader(str(path)).get_hirschberg_params()['base_case_cells'] == 4096


@pytest.mark.parametrize("document", [
    {'alignment': {'mode': 'glocal'}},
    {'alignment': {'gap_model': 'convex'}},
    {'alignment': {'gap_model': 'affine', 'gap_open': 1, 'gap_extend': 2}},
    {'alignment': {'gap_cost': -1}},
    {'progress': {'poll_every_rows': 0}},
    {'workspace': {'max_memory_fraction': 1.5}},
    {'hirschberg': {'base_case_cells': 'many'}},
    {'batch': {'num_workers': 0}},
    {'batch': {'num_workers': 'many'}},
    {'alignment': {'gap_char': '--'}},
    {'alignment': {'repeat_threshold': -1}},
    {'alignment': {'repeat_threshold': 'high'}},
])
def test_invalid_values(tmp_path, document):
    path = write_config(tmp_path / "bad.yaml", document)
    with pytest.raises(ConfigurationError):
        ConfigLoader(path)


def test_malformed_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("alignment: [unclosed\n")
    with pytest.raises(ConfigurationError):
        ConfigLoader(str(path))

    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigurationError):
        ConfigLoader(str(path))


def test_domain_objects_from_config(tmp_path):
    path = write_config(tmp_path / "affine.yaml", {
        'alignment': {'gap_model': 'affine', 'gap_open': 12, 'gap_extend': 2},
        'scoring': {'type': 'identity', 'alphabet': 'XY', 'match': 3, 'mismatch': -2},
    })
    loader = ConfigLoader(path)

    assert gap_cost_from_config(loader) == AffineGapCost(12, 2)
    model = score_model_from_config(loader)
    assert model.score('X', 'X') == 3
    assert model.score('X', 'Y') == -2

    assert gap_cost_from_config({'alignment': {'gap_cost': 3}}) == LinearGapCost(3)
    assert score_model_from_config({'scoring': {'type': 'hamming'}}).score('T', 'U') == 0


def test_make_aligner_selection(tmp_path):
    defaults = ConfigLoader()
    assert isinstance(make_aligner(config=defaults), LinearGapAligner)
    assert isinstance(make_aligner((10, 1), config=defaults), AffineGapAligner)
    assert isinstance(make_aligner(4, space_reduced=True, config=defaults), SpaceReducedAligner)

    with pytest.raises(ConfigurationError):
        make_aligner((10, 1), space_reduced=True, config=defaults)

    path = write_config(tmp_path / "c.yaml", {
        'alignment': {'space_reduced': True},
        'progress': {'poll_every_rows': 7},
        'hirschberg': {'base_case_cells': 64},
    })
    aligner = make_aligner(config=ConfigLoader(path))
    assert isinstance(aligner, SpaceReducedAligner)
    assert aligner.base_case_cells == 64
    assert aligner.poll_every_rows == 7


def test_reload_config(tmp_path):
    path = write_config(tmp_path / "c.yaml", {'batch': {'num_workers': 3}})
    try:
        loader = reload_config(path)
        assert loader.get_batch_params()['num_workers'] == 3
    finally:
        reload_config(str(DEFAULT_CONFIG_PATH))


def test_setup_logging(tmp_path):
    log_file = tmp_path / "seqalign.log"
    config = {'logging': {'level': 'DEBUG', 'log_file': str(log_file)}}

    logger = setup_logging(config)
    logger = setup_logging(config)
    assert logger.name == 'seqalign'
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2

    logger.debug("workspace grown")
    for handler in logger.handlers:
        handler.flush()
    assert "seqalign - DEBUG - workspace grown" in log_file.read_text()

    console_only = setup_logging({'logging': {'level': 'warning'}})
    assert len(console_only.handlers) == 1
    assert console_only.level == logging.WARNING


def test_configured_mode_is_the_default(tmp_path):
    """alignment.mode applies wherever a call leaves the mode out."""
    loader = ConfigLoader(write_config(tmp_path / "local.yaml", {'alignment': {'mode': 'local'}}))
    a, b = "TTTTACGTACGTTTTT", "GGACGTACGGG"

    aligner = make_aligner(8, config=loader)
    assert aligner.mode is AlignmentMode.LOCAL
    assert aligner.align(a, b, NUC, 8).score == 35
    assert make_aligner(8, space_reduced=True, config=loader).align(a, b, NUC, 8).score == 35

    result = align(a, b, NUC, 8, config=loader)
    assert result.mode is AlignmentMode.LOCAL
    assert result.score == 35
    assert align(a, b, NUC, 8, mode='global', config=loader).mode is AlignmentMode.GLOBAL
    assert align_score_only(a, b, NUC, 8, config=loader) == 35


def test_repeat_aligner_from_config():
    loader = ConfigLoader.from_dict({'alignment': {'mode': 'repeat', 'repeat_threshold': 3}})
    aligner = make_aligner(config=loader)
    assert isinstance(aligner, RepeatAligner)
    assert aligner.threshold == 3

    with pytest.raises(ConfigurationError):
        make_aligner(space_reduced=True, config=loader)


def test_from_dict_merges_defaults():
    loader = ConfigLoader.from_dict({'alignment': {'gap_cost': 6}})
    assert loader.config_path is None
    assert loader.get_alignment_params()['gap_cost'] == 6
    assert loader.get_alignment_params()['mode'] == 'global'
    assert as_config_loader(loader) is loader

    with pytest.raises(ConfigurationError):
        ConfigLoader.from_dict({'alignment': {'mode': 'glocal'}})


def test_setup_logging_from_loader(tmp_path):
    loader = ConfigLoader(write_config(tmp_path / "quiet.yaml", {'logging': {'level': 'ERROR'}}))
    logger = setup_logging(loader)
    assert logger.level == logging.ERROR
    assert len(logger.handlers) == 1
