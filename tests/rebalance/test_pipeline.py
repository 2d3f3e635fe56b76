'Tests for the balancing pipeline.'

import numpy as np
import pytest

from rebalance.config import BalancerConfig
from rebalance.pipeline import BalancingPipeline
from rebalance.utils import DegenerateSplit


class TestBalancingPipeline:
    'Tests for BalancingPipeline.'

    def test_init(self, sample_config):
        'Test pipeline initialization.'
        pipeline = BalancingPipeline(sample_config)

        assert pipeline.config == sample_config
        assert pipeline.result_ is None
        assert pipeline.output_paths_ == {}

    def test_run_writes_outputs(self, dataset_csv, sample_config, tmp_path):
        'Test that a run writes the three splits to the output directory.'
        output_dir = tmp_path / 'balanced'
        pipeline = BalancingPipeline(sample_config)

        result = pipeline.run(dataset_csv, output_dir=output_dir)

        assert result.counts()['train'] == {0: 100, 1: 100}
        assert (output_dir / 'mammography-training-oversample.csv').exists()
        assert (output_dir / 'mammography-validation-oversample.csv').exists()
        assert (output_dir / 'mammography-test-oversample.csv').exists()
        assert (output_dir / 'mammography-summary-oversample.json').exists()

    def test_default_output_next_to_input(self, dataset_csv, sample_config):
        'Test that outputs go next to the input file by default.'
        pipeline = BalancingPipeline(sample_config)

        pipeline.run(dataset_csv)

        assert pipeline.output_paths_['training'].parent == dataset_csv.parent

    def test_config_output_dir(self, dataset_csv, random_seed, tmp_path):
        'Test that config.output_dir is used when no directory is passed.'
        config = BalancerConfig(random_seed=random_seed, output_dir=str(tmp_path / 'cfg'))
        pipeline = BalancingPipeline(config)

        pipeline.run(dataset_csv)

        assert pipeline.output_paths_['test'].parent == tmp_path / 'cfg'

    def test_run_without_saving(self, dataset_csv, sample_config, tmp_path):
        'Test that save_outputs=False writes nothing.'
        output_dir = tmp_path / 'unused'
        pipeline = BalancingPipeline(sample_config)

        result = pipeline.run(dataset_csv, output_dir=output_dir, save_outputs=False)

        assert len(result.train) == 200
        assert not output_dir.exists()

    def test_written_splits_round_trip(self, dataset_csv, random_seed, tmp_path):
        'Test that written files read back to the in-memory result.'
        config = BalancerConfig(strategy='smote', k_neighbors=3, random_seed=random_seed)
        pipeline = BalancingPipeline(config)

        result = pipeline.run(dataset_csv, output_dir=tmp_path)
        splits = pipeline.get_writer(dataset_csv, tmp_path).load_all('smote')

        features, labels = splits['validation']
        np.testing.assert_allclose(features, result.valid)
        np.testing.assert_array_equal(labels, result.valid_labels)

    def test_degenerate_input(self, tmp_path, sample_config):
        'Test that a file without positives fails with DegenerateSplit.'
        path = tmp_path / 'negatives.csv'
        path.write_text(''.join(f'{i}.0,{i * 2}.0,0\n' for i in range(10)))

        with pytest.raises(DegenerateSplit):
            BalancingPipeline(sample_config).run(path, output_dir=tmp_path)
