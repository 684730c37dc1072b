#!/usr/bin/env python3
# ========================
# main.py
# ========================

"""
Main Entry Point for the EV Population Dashboard Pipeline

Loads the EV registration CSV (generating a sample one if it is missing),
applies an optional year/state filter and prints the dashboard summary.

Usage: python main.py [year|All] [state|All]
"""

import sys
import logging
from pathlib import Path

from src.ev_pipeline import DashboardPipeline, DashboardView, FilterSelection
from src.utils.config import is_url
from src.utils import Config, setup_logging, DataGenerator


def main(argv=None) -> int:
    """Main execution function."""
    argv = sys.argv[1:] if argv is None else argv
    config = Config()

    setup_logging(
        log_level=config.LOG_LEVEL,
        log_file="dashboard.log",
        log_dir=config.LOG_DIR
    )

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("EV POPULATION DASHBOARD - MAIN EXECUTION")
    logger.info("=" * 60)

    selection = FilterSelection(
        year=argv[0] if len(argv) > 0 else "All",
        state=argv[1] if len(argv) > 1 else "All",
    )

    try:
        config.ensure_directories()

        # Step 1: Make sure there is something to load
        if not is_url(config.DATA_PATH) and not Path(config.DATA_PATH).exists():
            logger.info(f"Step 1: {config.DATA_PATH} not found, generating sample data...")
            generator = DataGenerator(seed=42)
            generation_stats = generator.generate_dataset(
                file_path=config.DATA_PATH,
                num_rows=config.SAMPLE_ROWS,
            )
            logger.info(f"Sample data generated: {generation_stats}")

        # Step 2: Load and clean
        logger.info("Step 2: Loading dataset...")
        pipeline = DashboardPipeline(config=config)
        result = pipeline.load()
        if not result.ok:
            logger.error(f"Load failed: {result.error}")
            print(f"Error: {result.error}")
            return 1

        # Step 3: Derive the dashboard view
        logger.info(f"Step 3: Building dashboard view for {selection}")
        view = pipeline.build_view(selection)
        _print_dashboard_summary(view, pipeline.get_statistics())

        logger.info("Dashboard build completed successfully!")
        return 0

    except Exception as e:
        logger.error(f"Dashboard build failed: {e}", exc_info=True)
        return 1


def _print_dashboard_summary(view: DashboardView, stats: dict) -> None:
    """Print the dashboard contents to the console."""
    kpis = view.aggregates.kpis
    quality = stats['data_quality']

    print("\n" + "=" * 70)
    print("EV POPULATION DASHBOARD")
    print("=" * 70)
    print(f"Source: {stats['source']}")
    print(f"Filters: year={view.selection.year}, state={view.selection.state}")
    print(f"Cleaned records: {view.cleaned_count:,} "
          f"(dropped {quality['records_dropped']:,} of {quality['records_processed']:,} rows)")

    print("\n📊 KPIs:")
    print(f"   • Total EVs: {kpis.total:,}")
    print(f"   • Registered This Year ({view.current_year}): {kpis.current_year_count:,}")
    print(f"   • Avg Electric Range (miles): {kpis.avg_range}")

    print("\n📈 Registrations by Year:")
    for item in view.aggregates.yearly:
        print(f"   {item.year}: {item.count:,}")

    print("\n🗺  Top States:")
    for item in view.aggregates.top_states:
        print(f"   {item.state}: {item.count:,}")

    print("\n🚗 Vehicle Type Breakdown:")
    for item in view.aggregates.vehicle_types:
        print(f"   {item.type}: {item.value:,}")

    print(f"\n📋 Raw Data Sample ({len(view.table)} rows):")
    print(f"   {'Year':<6}{'State':<8}{'Make':<14}{'Model':<18}Type")
    for row in view.table:
        print(f"   {row['year']:<6}{row['state']:<8}{row['make']:<14}{row['model']:<18}{row['vehicleType']}")

    print("\nOptions:")
    print(f"   Years: {', '.join(str(y) for y in view.options.years)}")
    print(f"   States: {', '.join(view.options.states)}")
    print("=" * 70)


if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
