import json
from pathlib import Path
import re
import tempfile
import unittest

import pandas as pd
import yaml

from squash_BenchmarkReporter.core.context import BenchmarkContext
from squash_BenchmarkReporter.core.model import Dataset, MeasurementRecord
from squash_BenchmarkReporter.core.page import build_error_page, build_page
from squash_BenchmarkReporter.core.pipeline import run_pipeline
from squash_BenchmarkReporter.main import main


RECORDS = [
    ("zlib", "deflate", 500, 100, 50),
    ("lz4", "lz4", 700, 10, 5),
]


def _context(names):
    datasets = {n: Dataset(n, 1000, tuple(MeasurementRecord(*r) for r in RECORDS)) for n in names}
    return BenchmarkContext.from_datasets("memory", datasets)


def _panel_tags(html):
    return re.findall(r'<div class="dataset-panel"[^>]*>', html)


class PageTests(unittest.TestCase):
    def test_single_dataset_is_shown_without_navigation(self):
        html = build_page(_context(["alice29.txt"]))
        tags = _panel_tags(html)
        self.assertEqual(1, len(tags))
        self.assertNotIn("display:none", tags[0])
        self.assertNotIn('id="datasets-list"', html)
        self.assertIn("alice29.txt Results", html)

    def test_navigation_lists_datasets_in_order(self):
        html = build_page(_context(["kennedy.xls", "alice29.txt", "ptt5"]))
        nav = re.search(r'<ul id="datasets-list">(.*?)</ul>', html).group(1)
        self.assertEqual(["kennedy.xls", "alice29.txt", "ptt5"], re.findall(r">([^<]+)</a>", nav))
        tags = _panel_tags(html)
        self.assertEqual(3, len(tags))
        self.assertTrue(all("display:none" in t for t in tags))

    def test_email_prefill_from_configured_query(self):
        cfg = {"page": {"query": "email=someone%40example.com&ref=news"}}
        html = build_page(_context(["alice29.txt"]), cfg)
        self.assertIn('id="announce-email" name="email" value="someone@example.com"', html)

    def test_highlight_selects_rows_in_every_visualization(self):
        seen = {}

        def on_panel(name, visualizations):
            seen[name] = [v.selected_rows() for v in visualizations]

        cfg = {"page": {"highlight": ["lz4:lz4"]}}
        html = build_page(_context(["alice29.txt"]), cfg, on_panel=on_panel)
        self.assertEqual([[1]] * 6, seen["alice29.txt"])
        self.assertIn('<tr data-row="1" class="selected">', html)

    def test_element_ids_unique_when_names_collide(self):
        for names in (["a.txt", "a txt"], ["foo", "foo-ratio"]):
            ctx = _context(names)
            html = build_page(ctx)
            ids = re.findall(r'\sid="([^"]+)"', html)
            self.assertEqual(len(ids), len(set(ids)), f"duplicate ids for {names}")
            panel_ids = [re.search(r'id="([^"]+)"', t).group(1) for t in _panel_tags(html)]
            self.assertEqual([ctx.dataset_id(n) for n in names], panel_ids)
            hrefs = re.findall(r'<a href="#([^"]+)">', html)
            self.assertEqual(panel_ids, hrefs)

    def test_empty_page_section(self):
        html = build_page(_context(["alice29.txt"]), {"page": None})
        self.assertIn("Squash Compression Benchmark", html)
        self.assertEqual(1, len(_panel_tags(html)))

    def test_empty_document(self):
        html = build_page(_context([]))
        self.assertIn("contains no datasets", html)
        self.assertEqual([], _panel_tags(html))

    def test_error_page_has_no_panels(self):
        html = build_error_page("benchmark document is not valid JSON")
        self.assertEqual([], _panel_tags(html))
        self.assertIn("load-error", html)


class PipelineTests(unittest.TestCase):
    def test_outputs_per_dataset(self):
        cfg = {
            "reports": {"format": "csv"},
            "plots": {"static_png": True, "dpi": 40},
            "logging": {"verbose": False},
        }
        with tempfile.TemporaryDirectory() as tmpdir:
            out_root = Path(tmpdir) / "out"
            page = run_pipeline(_context(["alice29.txt", "kennedy.xls"]), cfg, out_root)

            self.assertTrue(page.exists(), "page missing")
            for ds in ("ds0-alice29-txt", "ds1-kennedy-xls"):
                report = out_root / ds / "report.csv"
                self.assertTrue(report.exists(), f"report missing for {ds}")
                df = pd.read_csv(report)
                self.assertEqual(["deflate", "lz4"], df["codec"].tolist())
                self.assertEqual(2.0, df["ratio"].iloc[0])
                self.assertIn("compress_wall", df.columns)
                pngs = sorted(p.name for p in (out_root / ds / "plots").glob("*.png"))
                self.assertEqual(5, len(pngs))

    def test_mat_report(self):
        from scipy.io import loadmat
        cfg = {"reports": {"format": "mat", "mat_variable": "bench"}, "logging": {"verbose": False}}
        with tempfile.TemporaryDirectory() as tmpdir:
            out_root = Path(tmpdir)
            run_pipeline(_context(["alice29.txt"]), cfg, out_root)
            mat = loadmat(out_root / "ds0-alice29-txt" / "report.mat")
            self.assertIn("bench", mat)

    def test_colliding_names_get_separate_folders(self):
        cfg = {"reports": {"format": "csv"}, "logging": {"verbose": False}}
        with tempfile.TemporaryDirectory() as tmpdir:
            out_root = Path(tmpdir)
            ctx = _context(["a.txt", "a txt"])
            run_pipeline(ctx, cfg, out_root)
            folders = [ctx.dataset_id(n) for n in ("a.txt", "a txt")]
            self.assertEqual(2, len(set(folders)))
            for folder in folders:
                self.assertTrue((out_root / folder / "report.csv").exists(), f"report missing in {folder}")

    def test_empty_sections(self):
        cfg = {"output": None, "reports": None, "plots": None, "logging": None}
        with tempfile.TemporaryDirectory() as tmpdir:
            page = run_pipeline(_context(["alice29.txt"]), cfg, Path(tmpdir))
            self.assertEqual("index.html", page.name)
            self.assertTrue((Path(tmpdir) / "ds0-alice29-txt" / "report.csv").exists())


class MainTests(unittest.TestCase):
    def _config(self, tmpdir, source):
        cfg = {
            "input": {"source": str(source)},
            "output": {"root": str(Path(tmpdir) / "out")},
            "reports": {"format": "none"},
            "logging": {"verbose": False, "level": "WARNING"},
        }
        p = Path(tmpdir) / "config.yaml"
        p.write_text(yaml.safe_dump(cfg), encoding="utf-8")
        return p

    def test_malformed_document_writes_error_page(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            src = Path(tmpdir) / "data.json"
            src.write_text("<html>not json</html>", encoding="utf-8")
            rc = main(["--config", str(self._config(tmpdir, src))])

            self.assertEqual(1, rc)
            html = (Path(tmpdir) / "out" / "index.html").read_text(encoding="utf-8")
            self.assertIn("load-error", html)
            self.assertEqual([], _panel_tags(html))

    def test_single_dataset_document(self):
        doc = {"alice29.txt": {"uncompressed-size": 1000, "data": [
            {"plugin": "zlib", "codec": "deflate", "size": 500,
             "compress_cpu": 100, "decompress_cpu": 50},
        ]}}
        with tempfile.TemporaryDirectory() as tmpdir:
            src = Path(tmpdir) / "data.json"
            src.write_text(json.dumps(doc), encoding="utf-8")
            rc = main(["--config", str(self._config(tmpdir, src))])

            self.assertEqual(0, rc)
            html = (Path(tmpdir) / "out" / "index.html").read_text(encoding="utf-8")
            tags = _panel_tags(html)
            self.assertEqual(1, len(tags))
            self.assertNotIn("display:none", tags[0])

    def test_empty_config_sections(self):
        doc = {"alice29.txt": {"uncompressed-size": 1000, "data": [
            {"plugin": "zlib", "codec": "deflate", "size": 500,
             "compress_cpu": 100, "decompress_cpu": 50},
        ]}}
        with tempfile.TemporaryDirectory() as tmpdir:
            src = Path(tmpdir) / "data.json"
            src.write_text(json.dumps(doc), encoding="utf-8")
            cfg_path = Path(tmpdir) / "config.yaml"
            cfg_path.write_text("input:\noutput:\npage:\nlogging:\nreports:\n  format: none\n",
                                encoding="utf-8")
            out = Path(tmpdir) / "out"
            rc = main(["--config", str(cfg_path), "--source", str(src), "--out", str(out)])

            self.assertEqual(0, rc)
            self.assertTrue((out / "index.html").exists())

    def test_out_of_range_number_writes_error_page(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            src = Path(tmpdir) / "data.json"
            src.write_text('{"x": {"uncompressed-size": 1' + "0" * 400 + ', "data": []}}',
                           encoding="utf-8")
            rc = main(["--config", str(self._config(tmpdir, src))])

            self.assertEqual(1, rc)
            html = (Path(tmpdir) / "out" / "index.html").read_text(encoding="utf-8")
            self.assertIn("out of range", html)

    def test_bad_report_format(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            src = Path(tmpdir) / "data.json"
            src.write_text(json.dumps({}), encoding="utf-8")
            cfg_path = self._config(tmpdir, src)
            cfg = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
            cfg["reports"]["format"] = "xlsx"
            cfg_path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
            self.assertEqual(2, main(["--config", str(cfg_path)]))


if __name__ == "__main__":
    unittest.main()
