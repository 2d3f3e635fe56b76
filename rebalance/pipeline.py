'Balancing pipeline orchestrator: load, split, balance, write.'

from pathlib import Path
from typing import Optional, Union

from rebalance.config import BalancerConfig
from rebalance.data import BalancedResult, ClassBalancer, DataLoader, DatasetWriter
from rebalance.utils import get_logger


class BalancingPipeline:
    '''
    End-to-end preparation of a skewed binary dataset for classifier training.

    Orchestrates:
    1. Loading features and labels from the input file
    2. Stratified per-class split into training/validation/test
    3. Balancing of training and validation with the configured strategy
    4. Writing the three splits and a summary next to each other

    The written files are the input of the downstream network training,
    which is not part of this package.
    '''

    def __init__(self, config: Optional[BalancerConfig] = None):
        self.config = config or BalancerConfig()
        self.logger = get_logger('pipeline')

        # Initialize components
        self.loader = DataLoader(delimiter=self.config.delimiter)
        self.balancer = ClassBalancer(self.config)

        # State
        self.result_: Optional[BalancedResult] = None
        self.output_paths_: dict[str, Path] = {}

    def run(
        self,
        input_path: Union[str, Path],
        output_dir: Optional[Union[str, Path]] = None,
        save_outputs: bool = True
    ) -> BalancedResult:
        '''
        Run the pipeline on one dataset file.

        Args:
            input_path: CSV (or parquet) file, features then a 0/1 label column
            output_dir: Where to write the splits; defaults to config.output_dir,
                then to the input file's directory
            save_outputs: Whether to write the split files

        Returns:
            BalancedResult
        '''
        input_path = Path(input_path)

        self.logger.info('Step 1: Loading data...')
        features, labels = self.loader.load(input_path)

        self.logger.info('Step 2: Splitting and balancing...')
        self.result_ = self.balancer.balance(features, labels)

        if save_outputs:
            self.logger.info('Step 3: Writing splits...')
            writer = self.get_writer(input_path, output_dir)
            self.output_paths_ = writer.save_all(
                self.result_, params=self.balancer.get_params()
            )

        self.logger.info('Pipeline complete!')
        return self.result_

    def get_writer(
        self,
        input_path: Union[str, Path],
        output_dir: Optional[Union[str, Path]] = None
    ) -> DatasetWriter:
        'Writer for the outputs of an input file.'
        input_path = Path(input_path)
        if output_dir is None:
            output_dir = self.config.output_dir or input_path.parent
        return DatasetWriter(
            output_dir=output_dir,
            stem=input_path.stem,
            delimiter=self.config.delimiter
        )
