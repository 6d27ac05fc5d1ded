import math
import unittest

from squash_BenchmarkReporter.core.model import Dataset, MeasurementRecord
from squash_BenchmarkReporter.core.projection import project, round2
from squash_BenchmarkReporter.core.views import VIEW_DEFINITIONS, select_views


def _dataset(records, name="alice29.txt", uncompressed_size=1000):
    return Dataset(
        name=name,
        uncompressed_size=uncompressed_size,
        records=tuple(MeasurementRecord(*r) for r in records),
    )


class Round2Tests(unittest.TestCase):
    def test_half_rounds_away_from_zero(self):
        self.assertEqual(1.01, round2(1.005))
        self.assertEqual(2.68, round2(2.675))
        self.assertEqual(-1.01, round2(-1.005))
        self.assertEqual(0.01, round2(0.009765625))

    def test_idempotent(self):
        for x in (0.0, 1.005, 3.14159, -7.125, 123456.789, 1e-9, 0.1 + 0.2):
            self.assertEqual(round2(x), round2(round2(x)))

    def test_non_finite_passes_through(self):
        self.assertEqual(math.inf, round2(math.inf))
        self.assertEqual(-math.inf, round2(-math.inf))
        self.assertTrue(math.isnan(round2(math.nan)))


class ProjectionTests(unittest.TestCase):
    def test_reference_record(self):
        table = project(_dataset([("zlib", "deflate", 500, 100, 50)]))
        rows = list(table.rows())
        self.assertEqual([("zlib", "deflate", 2.0, 0.01, 0.02)], rows)
        self.assertEqual((), table.warnings)

    def test_row_count_matches_records(self):
        recs = [("p", f"c{i}", 100 + i, 0.5, 0.25) for i in range(7)]
        table = project(_dataset(recs))
        self.assertEqual(7, len(table))
        self.assertEqual(["plugin", "codec", "ratio", "compress_speed", "decompress_speed"],
                         list(table.frame.columns))
        self.assertEqual([f"c{i}" for i in range(7)], table.frame["codec"].tolist())

    def test_empty_dataset(self):
        table = project(_dataset([]))
        self.assertEqual(0, len(table))
        self.assertEqual(5, len(table.frame.columns))

    def test_zero_size_is_infinite_and_warned(self):
        table = project(_dataset([("copy", "copy", 0, 0.001, 0.001)]))
        ratio = table.frame["ratio"].iloc[0]
        self.assertTrue(math.isinf(ratio))
        self.assertEqual(1, len(table.warnings))
        self.assertEqual("ratio", table.warnings[0].column)
        self.assertEqual(0, table.warnings[0].row)

    def test_zero_cpu_time(self):
        table = project(_dataset([("copy", "copy", 1000, 0, 0)]))
        self.assertTrue(math.isinf(table.frame["compress_speed"].iloc[0]))
        self.assertTrue(math.isinf(table.frame["decompress_speed"].iloc[0]))
        self.assertEqual({"compress_speed", "decompress_speed"}, {w.column for w in table.warnings})


class ViewSelectionTests(unittest.TestCase):
    def test_fixed_views_in_order_sharing_the_table(self):
        table = project(_dataset([("zlib", "deflate", 500, 100, 50), ("lz4", "lz4", 700, 10, 5)]))
        views = select_views(table)
        self.assertEqual(
            ["table", "ratio", "speed", "ratio_vs_compress_speed",
             "ratio_vs_decompress_speed", "speed_compare"],
            [v.view_id for v in views],
        )
        self.assertTrue(all(v.table is table for v in views))
        self.assertEqual(len(VIEW_DEFINITIONS), len(views))

    def test_scatter_views_carry_codec_tooltip(self):
        table = project(_dataset([("zlib", "deflate", 500, 100, 50)]))
        by_id = {v.view_id: v for v in select_views(table)}

        ratio_vs_speed = by_id["ratio_vs_compress_speed"]
        self.assertEqual(["compress_speed", "ratio"], [c.name for c in ratio_vs_speed.data_columns()])
        self.assertEqual(["codec"], [c.name for c in ratio_vs_speed.tooltip_columns()])
        self.assertEqual(["data", "data", "tooltip"], ratio_vs_speed.roles())
        frame = ratio_vs_speed.frame()
        self.assertEqual(["compress_speed", "ratio", "codec__tooltip"], list(frame.columns))

        self.assertEqual(["codec", "ratio"], [c.name for c in by_id["ratio"].column_specs()])
        self.assertEqual(["codec", "compress_speed", "decompress_speed"],
                         [c.name for c in by_id["speed"].column_specs()])
        self.assertEqual(["compress_speed", "decompress_speed"],
                         [c.name for c in by_id["speed_compare"].data_columns()])


if __name__ == "__main__":
    unittest.main()
