"""
Command-line interface for the domain finder.

Paths, concurrency and throttling come from the environment (or a .env file);
the command line only controls logging and which .env file to load.
"""
import argparse
import asyncio
import logging
import os
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from domain_finder.config import Config, ConfigurationError
from domain_finder.csv_io import InputFileError, OutputFileError, read_names, write_outcomes
from domain_finder.orchestrator import BatchRunner


# Initialize logger
log = logging.getLogger(__name__)


class CLIError(Exception):
    """Exception raised for CLI errors."""
    pass


class CLI:
    """Command-line interface with input validation and run reporting."""

    def __init__(self):
        """Initialize the CLI."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create command-line argument parser.

        Returns:
            Configured argument parser
        """
        parser = argparse.ArgumentParser(
            description=(
                "Find the primary domain of each name in a CSV file. "
                "Configure with INPUT, OUTPUT, CONCURRENCY and DELAY."
            ),
            formatter_class=argparse.ArgumentDefaultsHelpFormatter
        )

        parser.add_argument(
            "-v", "--verbose",
            action="store_true",
            help="Enable verbose logging"
        )

        parser.add_argument(
            "--config",
            help="Path to custom .env configuration file"
        )

        return parser

    def load_config(self, env_file: Optional[str]) -> Optional[Config]:
        """
        Build and validate the run configuration.

        Args:
            env_file: Optional .env file to load

        Returns:
            Validated configuration, or None if invalid
        """
        try:
            config = Config(env_file)
            config.validate_or_raise()
            return config
        except ConfigurationError as e:
            log.error("Configuration error: %s", e)
            return None

    def validate_input_file(self, file_path: str) -> Tuple[bool, Optional[str]]:
        """
        Validate that the input file exists.

        Args:
            file_path: Path to input file

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not os.path.isfile(file_path):
            return False, f"Input file not found: {file_path}"
        return True, None

    def validate_output_file(self, file_path: str) -> Tuple[bool, Optional[str]]:
        """
        Validate that the output file can be written.

        Args:
            file_path: Path to output file

        Returns:
            Tuple of (is_valid, error_message)
        """
        output_dir = os.path.dirname(file_path)
        if output_dir and not os.path.isdir(output_dir):
            return False, f"Output directory does not exist: {output_dir}"

        if os.path.exists(file_path):
            if not os.access(file_path, os.W_OK):
                return False, f"Output file is not writable: {file_path}"
        elif not os.access(output_dir or ".", os.W_OK):
            return False, f"Cannot write to output directory: {output_dir or '.'}"

        return True, None

    def setup_logging(self, verbose: bool) -> str:
        """
        Set up logging configuration.

        Args:
            verbose: Whether to enable verbose logging

        Returns:
            Path to log file
        """
        logfile = f"domain_finder_{time.strftime('%Y%m%d_%H%M%S')}.log"

        level = logging.DEBUG if verbose else logging.INFO

        logging.basicConfig(
            level=level,
            format="%(asctime)s | %(levelname)-7s | %(name)-20s | %(message)s",
            handlers=[
                logging.FileHandler(logfile, encoding="utf-8"),
                logging.StreamHandler(sys.stdout)
            ]
        )

        # Set lower level for external libraries
        logging.getLogger("asyncio").setLevel(logging.WARNING)

        return logfile

    def find_domains(self, args: argparse.Namespace) -> bool:
        """
        Read names, look up their domains and write the results.

        Args:
            args: Command-line arguments

        Returns:
            True if the run completed, False on configuration or file errors
        """
        logfile = self.setup_logging(args.verbose)

        config = self.load_config(args.config)
        if config is None:
            log.error("Environment validation failed")
            return False

        log.info("Domain finder starting")
        log.info("Input file: %s", config.input_path)
        log.info("Output file: %s", config.output_path)
        log.info("Concurrency: %d", config.concurrency)
        log.info("Delay between batches: %d ms", config.delay_ms)

        valid_input, input_error = self.validate_input_file(config.input_path)
        if not valid_input:
            log.error("Input validation failed: %s", input_error)
            return False

        valid_output, output_error = self.validate_output_file(config.output_path)
        if not valid_output:
            log.error("Output validation failed: %s", output_error)
            return False

        log.info("Reading and cleaning CSV data...")
        try:
            names = read_names(config.input_path)
        except InputFileError as e:
            log.error("Failed to load input file: %s", e)
            return False
        log.info("Total valid entries: %d", len(names))

        start_time = time.time()
        runner = BatchRunner.from_config(config)
        log.info("Searching domains with concurrency = %d...", config.concurrency)
        outcomes = asyncio.run(runner.run(names))

        log.info("Saving results to CSV...")
        try:
            rows = write_outcomes(config.output_path, outcomes)
        except OutputFileError as e:
            log.error("%s", e)
            return False

        elapsed = time.time() - start_time
        stats = runner.stats
        log.info(
            "\n+--------------------------------------------------+\n"
            "| RUN SUMMARY                                      |\n"
            "+--------------------------------------------------+\n"
            f"| Names           : {stats['names']:>3}\n"
            f"| Batches         : {stats['batches']:>3}\n"
            f"| Domain found    : {stats['resolved']:>3}\n"
            f"| Not found       : {stats['not_found']:>3}\n"
            f"| Errors          : {stats['failed']:>3}\n"
            f"| Runtime         : {elapsed:6.1f} s\n"
            "+--------------------------------------------------+"
        )
        log.info('Results saved to "%s" (%d rows).', config.output_path, rows)
        log.info("Verbose log -> %s", Path(logfile).resolve())

        return True

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run the CLI with the given arguments.

        Args:
            args: Command-line arguments (defaults to sys.argv[1:])

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        try:
            parsed_args = self.parser.parse_args(args)

            success = self.find_domains(parsed_args)

            return 0 if success else 1

        except Exception as e:
            log.error("Unhandled exception: %s", e, exc_info=True)
            return 1


def main() -> int:
    """
    Main entry point for the domain finder.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    cli = CLI()

    try:
        return cli.run()

    except KeyboardInterrupt:
        log.warning("Execution interrupted by user")
        return 130
