"""
Reporting for the CLI interface.

Prints the end-of-run summary of upgraded, unchanged and failed files.
"""

from __future__ import annotations

from ..models import FileOutcome, RunStats


def print_upgrade_report(outcomes: list[FileOutcome], stats: RunStats) -> None:
    """
    Print a summary of the run.

    Args:
        outcomes: Per-file outcomes
        stats: Aggregated counts
    """
    print("\n" + "=" * 60)
    print("UPGRADE REPORT")
    print("=" * 60)

    print(f"\nFiles processed: {stats.processed:,} of {stats.total_files:,}")
    print(f"  Upgraded:  {stats.upgraded:,} ({stats.upgrade_rate:.1f}%)")
    print(f"  Unchanged: {stats.unchanged:,}")
    print(f"  Failed:    {stats.failed:,}")
    print(f"Elapsed: {stats.elapsed:.1f}s")

    upgraded = sorted((o for o in outcomes if o.upgraded), key=lambda o: o.path)
    if upgraded:
        print("\n" + "-" * 60)
        print("UPGRADED")
        print("-" * 60)
        for outcome in upgraded:
            print(f"  {outcome.path}")
            print(f"    {outcome.resolution_change}  similarity {outcome.similarity:.3f}")
            print(f"    from {outcome.url}")

    failed = sorted((o for o in outcomes if o.failed), key=lambda o: o.path)
    if failed:
        print("\n" + "-" * 60)
        print("FAILED")
        print("-" * 60)
        for outcome in failed:
            print(f"  {outcome.path}")
            print(f"    {outcome.error}")

    print()


__all__ = ['print_upgrade_report']
