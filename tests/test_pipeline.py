# ========================
# tests/test_pipeline.py
# ========================

import unittest
import sys
import os

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.ev_pipeline.cleaning import RecordCleaner, clean, to_number
from src.ev_pipeline.exceptions import MissingColumnsError
from src.ev_pipeline.filtering import filter_records
from src.ev_pipeline.options import derive_filter_options
from src.ev_pipeline.schema import (
    ColumnMapping,
    FilterSelection,
    KPISet,
    Record,
    StateCount,
    YearlyCount,
)
from src.ev_pipeline.transformation import DataAggregator, aggregate, round_half_up
from src.utils.data_generator import DataGenerator

BEV = "Battery Electric Vehicle (BEV)"
PHEV = "Plug-in Hybrid Electric Vehicle (PHEV)"


def raw_row(year=2020, state="WA", make="TESLA", model="MODEL 3", vehicle_type=BEV, electric_range=220):
    return {
        'Model Year': year,
        'State': state,
        'Make': make,
        'Model': model,
        'Electric Vehicle Type': vehicle_type,
        'Electric Range': electric_range,
    }


class TestRecordCleaner(unittest.TestCase):

    def setUp(self):
        self.cleaner = RecordCleaner()

    def test_cleaner_valid_record(self):
        """A complete row maps onto every Record field."""
        record = self.cleaner.clean_record(raw_row())

        self.assertEqual(record, Record(
            year=2020, state='WA', make='TESLA', model='MODEL 3',
            vehicle_type=BEV, range=220,
        ))

    def test_malformed_year_row_is_dropped(self):
        """
        Mixed input: two valid rows, one with a non-numeric year.
        """
        rows = [
            raw_row(year=2020, state="WA", electric_range="150"),
            raw_row(year=2020, state="CA"),
            raw_row(year="bad"),
        ]
        cleaned = self.cleaner.clean(rows)

        self.assertEqual(len(cleaned), 2)
        self.assertEqual([r.state for r in cleaned], ['WA', 'CA'])
        self.assertEqual(cleaned[0].range, 150)
        self.assertEqual(aggregate(cleaned, current_year=2024).yearly, [YearlyCount(year=2020, count=2)])

    def test_year_parsing_edge_cases(self):
        cases = [
            (2020, 2020),
            ('2021', 2021),
            (' 2022 ', 2022),
            (2019.0, 2019),
            ('', None),
            (None, None),
            (0, None),
            ('0', None),
            ('N/A', None),
            ('2020.5', None),
            ('inf', None),
            ('nan', None),
            (int('9' * 400), None),
            ('9' * 400, None),
        ]
        for value, expected in cases:
            record = self.cleaner.clean_record(raw_row(year=value))
            if expected is None:
                self.assertIsNone(record, f"Expected drop for year: {value!r}")
            else:
                self.assertEqual(record.year, expected, f"Failed for year: {value!r}")

    def test_string_defaults(self):
        record = self.cleaner.clean_record(raw_row(state=None, make='', model='   ', vehicle_type=None))

        self.assertEqual(record.state, 'Unknown')
        self.assertEqual(record.make, 'Unknown')
        self.assertEqual(record.model, 'Unknown')
        self.assertEqual(record.vehicle_type, 'Other')

    def test_numeric_strings_fields(self):
        """Dynamically typed numbers in text columns render without a trailing .0"""
        record = self.cleaner.clean_record(raw_row(model=3, make=500.0, state=' WA '))

        self.assertEqual(record.model, '3')
        self.assertEqual(record.make, '500')
        self.assertEqual(record.state, 'WA')

    def test_range_defaults(self):
        cases = [
            (150, 150),
            ('150', 150),
            (25.5, 25.5),
            ('n/a', 0),
            ('', 0),
            (None, 0),
            (-1, 0),
            ('-30', 0),
            (float('inf'), 0),
            (int('9' * 400), 0),
            ('9' * 400, 0),
        ]
        for value, expected in cases:
            record = self.cleaner.clean_record(raw_row(electric_range=value))
            self.assertEqual(record.range, expected, f"Failed for range: {value!r}")

    def test_missing_columns_default(self):
        """Absent columns fall back to defaults; an absent year column drops every row."""
        record = self.cleaner.clean_record({'Model Year': 2020})
        self.assertEqual(record, Record(year=2020))

        self.assertEqual(self.cleaner.clean([{'State': 'WA'}]), [])

    def test_validate_columns(self):
        header = ['Model Year', 'State', 'Make', 'Model']
        missing = self.cleaner.validate_columns(header)
        self.assertEqual(missing, ['Electric Vehicle Type', 'Electric Range'])

        strict = RecordCleaner(strict_columns=True)
        with self.assertRaises(MissingColumnsError) as ctx:
            strict.validate_columns(header)
        self.assertEqual(ctx.exception.missing, ['Electric Vehicle Type', 'Electric Range'])

        self.assertEqual(strict.validate_columns(list(ColumnMapping().columns().values())), [])

    def test_custom_column_mapping(self):
        columns = ColumnMapping(year='year', state='st', make='mk', model='md', vehicle_type='kind', range='miles')
        cleaner = RecordCleaner(columns)
        record = cleaner.clean_record({'year': 2023, 'st': 'OR', 'mk': 'FORD', 'md': 'F-150', 'kind': BEV, 'miles': 240})

        self.assertEqual(record, Record(year=2023, state='OR', make='FORD', model='F-150', vehicle_type=BEV, range=240))

    def test_order_preserved_without_deduplication(self):
        rows = [raw_row(year=2021), raw_row(year=2019), raw_row(year=2021)]
        self.assertEqual([r.year for r in clean(rows)], [2021, 2019, 2021])

    def test_statistics(self):
        self.cleaner.clean([raw_row(), raw_row(year=''), raw_row(year='x'), raw_row()])
        stats = self.cleaner.get_statistics()

        self.assertEqual(stats['records_processed'], 4)
        self.assertEqual(stats['records_dropped'], 2)
        self.assertEqual(stats['records_cleaned'], 2)
        self.assertEqual(stats['success_rate'], 50.0)

    def test_cleaned_records_invariants(self):
        """Generated rows plus malformed ones never yield empty strings or negative ranges."""
        rows = DataGenerator(seed=7).generate_rows(200)
        rows += [raw_row(year='N/A'), raw_row(state='', electric_range='-1'), raw_row(make=None)]
        cleaned = clean(rows)

        self.assertLessEqual(len(cleaned), len(rows))
        for record in cleaned:
            self.assertIsInstance(record.year, int)
            self.assertGreaterEqual(record.range, 0)
            for value in (record.state, record.make, record.model, record.vehicle_type):
                self.assertTrue(value)

    def test_to_number(self):
        self.assertEqual(to_number('12.5'), 12.5)
        self.assertEqual(to_number(7), 7.0)
        self.assertIsNone(to_number(True))
        self.assertIsNone(to_number('abc'))
        self.assertIsNone(to_number([]))


class TestFilterRecords(unittest.TestCase):

    def setUp(self):
        self.records = [
            Record(year=2019, state='WA'),
            Record(year=2020, state='WA'),
            Record(year=2020, state='CA'),
            Record(year=2021, state='OR'),
        ]

    def test_all_all_is_identity(self):
        self.assertEqual(filter_records(self.records, FilterSelection()), self.records)

    def test_year_filter(self):
        filtered = filter_records(self.records, FilterSelection(year='2020', state='All'))

        self.assertEqual(len(filtered), 2)
        self.assertTrue(all(r.year == 2020 for r in filtered))

    def test_state_filter(self):
        filtered = filter_records(self.records, FilterSelection(state='WA'))
        self.assertEqual([r.year for r in filtered], [2019, 2020])

    def test_combined_filter(self):
        filtered = filter_records(self.records, FilterSelection(year='2020', state='CA'))
        self.assertEqual(filtered, [Record(year=2020, state='CA')])

    def test_exact_match_only(self):
        self.assertEqual(filter_records(self.records, FilterSelection(state='wa')), [])
        self.assertEqual(filter_records(self.records, FilterSelection(state='W')), [])

    def test_non_numeric_year_matches_nothing(self):
        self.assertEqual(filter_records(self.records, FilterSelection(year='latest')), [])

    def test_empty_result_is_valid(self):
        self.assertEqual(filter_records(self.records, FilterSelection(year='1999')), [])
        self.assertEqual(filter_records([], FilterSelection(year='2020')), [])

    def test_idempotent(self):
        selection = FilterSelection(year='2020', state='WA')
        once = filter_records(self.records, selection)
        self.assertEqual(filter_records(once, selection), once)


class TestDataAggregator(unittest.TestCase):

    def setUp(self):
        self.aggregator = DataAggregator()

    def test_aggregator_logic(self):
        records = [
            Record(year=2021, state='WA', vehicle_type=BEV, range=200),
            Record(year=2019, state='CA', vehicle_type=PHEV, range=25),
            Record(year=2021, state='WA', vehicle_type=BEV, range=0),
            Record(year=2020, state='OR', vehicle_type=BEV, range=150),
        ]
        views = self.aggregator.aggregate(records, current_year=2021)

        self.assertEqual(views.yearly, [
            YearlyCount(2019, 1), YearlyCount(2020, 1), YearlyCount(2021, 2),
        ])
        self.assertEqual(views.top_states, [
            StateCount('WA', 2), StateCount('CA', 1), StateCount('OR', 1),
        ])
        self.assertEqual([(v.type, v.value) for v in views.vehicle_types], [(BEV, 3), (PHEV, 1)])
        self.assertEqual(views.kpis, KPISet(total=4, current_year_count=2, avg_range=93.75))

    def test_top_states_example(self):
        records = [Record(year=2020, state='WA'), Record(year=2020, state='CA'), Record(year=2020, state='WA')]
        views = self.aggregator.aggregate(records, current_year=2020)

        self.assertEqual([s.to_dict() for s in views.top_states], [
            {'state': 'WA', 'count': 2},
            {'state': 'CA', 'count': 1},
        ])

    def test_top_states_truncated_and_stable(self):
        records = []
        # 12 states with one record each, then one extra for 'S11'
        for i in range(12):
            records.append(Record(year=2020, state=f'S{i:02d}'))
        records.append(Record(year=2020, state='S11'))

        top = self.aggregator.aggregate(records, current_year=2020).top_states

        self.assertEqual(len(top), 10)
        self.assertEqual(top[0], StateCount('S11', 2))
        # Ties keep first-seen order
        self.assertEqual([s.state for s in top[1:]], [f'S{i:02d}' for i in range(9)])

    def test_top_n_configurable(self):
        records = [Record(year=2020, state=s) for s in ('WA', 'CA', 'OR')]
        self.assertEqual(len(aggregate(records, current_year=2020, top_n=2).top_states), 2)

    def test_yearly_properties(self):
        records = [r for r in clean(DataGenerator(seed=3).generate_rows(300))]
        yearly = self.aggregator.aggregate(records, current_year=2024).yearly

        years = [item.year for item in yearly]
        self.assertEqual(years, sorted(set(years)))
        self.assertEqual(sum(item.count for item in yearly), len(records))

    def test_empty_set(self):
        views = self.aggregator.aggregate([], current_year=2024)

        self.assertEqual(views.yearly, [])
        self.assertEqual(views.top_states, [])
        self.assertEqual(views.vehicle_types, [])
        self.assertEqual(views.kpis, KPISet(total=0, current_year_count=0, avg_range=0))
        self.assertEqual(views.kpis.avg_range, 0)

    def test_current_year_is_an_input(self):
        records = [Record(year=2023), Record(year=2024), Record(year=2024)]

        self.assertEqual(self.aggregator.kpis(records, 2023).current_year_count, 1)
        self.assertEqual(self.aggregator.kpis(records, 2024).current_year_count, 2)
        self.assertEqual(self.aggregator.kpis(records, 2030).current_year_count, 0)

    def test_avg_range_rounding(self):
        records = [Record(year=2020, range=r) for r in (10, 10, 11)]
        self.assertEqual(self.aggregator.kpis(records, 2020).avg_range, 10.33)

        self.assertEqual(round_half_up(0.125), 0.13)
        self.assertEqual(round_half_up(2.5, 0), 3)
        self.assertEqual(round_half_up(93.75), 93.75)
        self.assertEqual(round_half_up(1.005), 1.0)

    def test_serialized_keys(self):
        views = aggregate([Record(year=2020, state='WA', vehicle_type=BEV, range=100)], current_year=2020)

        self.assertEqual(views.to_dict(), {
            'yearly': [{'year': 2020, 'count': 1}],
            'topStates': [{'state': 'WA', 'count': 1}],
            'vehicleTypes': [{'type': BEV, 'value': 1}],
            'kpis': {'total': 1, 'currentYearCount': 1, 'avgRange': 100},
        })


class TestFilterOptions(unittest.TestCase):

    def test_sorted_with_all_prefix(self):
        records = [
            Record(year=2021, state='WA'),
            Record(year=2019, state='CA'),
            Record(year=2021, state='Unknown'),
            Record(year=2020, state='AK'),
        ]
        options = derive_filter_options(records)

        self.assertEqual(options.years, ['All', 2019, 2020, 2021])
        self.assertEqual(options.states, ['All', 'AK', 'CA', 'Unknown', 'WA'])

    def test_empty_dataset(self):
        options = derive_filter_options([])
        self.assertEqual(options.to_dict(), {'years': ['All'], 'states': ['All']})


if __name__ == '__main__':
    unittest.main()
