import argparse
import logging

from metapop_sir.config import get_config, load_config
from metapop_sir.experiment import ExperimentConfig, ExperimentDirectory, generate_seeds
from metapop_sir.logging_utils import setup_logging
from metapop_sir.scenarios import list_scenarios
from metapop_sir.simulation import run_replicates

logger = logging.getLogger("main")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--config",
        type=str,
        default="default",
        help="Which named configuration to use",
    )
    parser.add_argument(
        "--config-file",
        type=str,
        default=None,
        help="JSON configuration file (overrides --config)",
    )
    parser.add_argument(
        "--scenario",
        type=str,
        default=None,
        choices=list_scenarios(),
        help="Intervention scenario to apply",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed of the first replicate")
    parser.add_argument("--days", type=int, default=None, help="Override the simulation horizon")
    parser.add_argument("--replicates", type=int, default=1, help="Number of seeded replicates")
    parser.add_argument("--output-dir", type=str, default="experiments")
    parser.add_argument("--log-level", type=str, default="INFO")
    args = parser.parse_args()

    setup_logging(level=args.log_level)

    config = load_config(args.config_file) if args.config_file else get_config(args.config)
    if args.days is not None:
        config.days = args.days

    if args.seed is not None:
        seeds = [args.seed + k for k in range(args.replicates)]
    else:
        seeds = generate_seeds(args.replicates)

    exp_config = ExperimentConfig(
        base_config=config,
        scenario_name=args.scenario or "baseline",
        seeds=seeds,
    )
    exp_dir = ExperimentDirectory(exp_config, base_dir=args.output_dir)
    exp_dir.save_config()

    results = run_replicates(config, seeds, scenario=args.scenario)
    for result in results:
        exp_dir.save_result(result)
    exp_dir.save_summary(results)

    logger.info("Done! Results written to %s", exp_dir)
