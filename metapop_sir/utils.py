import os

from .simulation import SimulationResult


def log_results(result: SimulationResult, log_dir: str = "logs") -> str:
    """
    Logs a simulation result to a text file with table format.

    :param result: Simulation result to log
    :param log_dir: Directory to save log files (default: "logs")
    :return: Path of the written file
    """
    os.makedirs(log_dir, exist_ok=True)

    log_path = os.path.join(log_dir, f"{result.name}.txt")
    series = result.series

    with open(log_path, "w", encoding="utf-8") as f:
        f.write(f"Simulation Log: {result.name}\n")
        if not result.complete:
            f.write("WARNING: run stopped before its horizon, results are incomplete\n")
        f.write("=" * 72 + "\n\n")

        header = f"{'Day':<8} {'Location':<10} {'S':<12} {'I':<12} {'R':<12} {'newI':<10}\n"
        f.write(header)
        f.write("-" * 72 + "\n")

        for row in series.to_records():
            f.write(
                f"{row['day']:<8} {row['location']:<10} {row['S']:<12} "
                f"{row['I']:<12} {row['R']:<12} {row['newI']:<10}\n"
            )

        f.write("\n" + "=" * 72 + "\n")
        f.write("Summary Statistics:\n")
        f.write(f"  Peak Infected: {result.peak_infected} (day {result.peak_day})\n")
        f.write(f"  Total Infected: {result.total_infected}\n")
        f.write(f"  Attack Rate: {result.attack_rate:.4f}\n")
        f.write(f"  Epidemic Duration: {result.epidemic_duration} days\n")

    return log_path
