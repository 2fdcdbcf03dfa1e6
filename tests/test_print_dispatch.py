from io import BytesIO
from pathlib import Path
import subprocess
from tempfile import TemporaryDirectory
import unittest
from unittest.mock import Mock, patch

import fitz
from PIL import Image

from label_editor.errors import DispatchError
from print_dispatch import CupsDispatcher, custom_page_size, open_with_system_viewer


def _png(width: int = 732, height: int = 354) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), "white").save(buffer, format="PNG")
    return buffer.getvalue()


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(
        args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class CustomPageSizeTests(unittest.TestCase):
    def test_tenths_of_millimeter(self) -> None:
        self.assertEqual(custom_page_size(100, 50), "PageSize=Custom.1000x500")

    def test_fractions_are_truncated(self) -> None:
        self.assertEqual(custom_page_size(62.57, 29.99), "PageSize=Custom.625x299")


class CupsDispatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = TemporaryDirectory()
        self.output_dir = Path(self._tmp.name)
        self.dispatcher = CupsDispatcher(self.output_dir, open_preview=False)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_preview_writes_pdf_of_exact_size(self) -> None:
        artifact = self.dispatcher.generate_print_artifact(_png(), 62, 30, None)

        path = Path(artifact)
        self.assertEqual(path.parent, self.output_dir)
        self.assertTrue(path.name.startswith("label_"))
        self.assertEqual(path.suffix, ".pdf")
        with fitz.open(str(path)) as doc:
            rect = doc.load_page(0).rect
            self.assertAlmostEqual(rect.width, 62 / 25.4 * 72, places=1)
            self.assertAlmostEqual(rect.height, 30 / 25.4 * 72, places=1)

    @patch("print_dispatch.open_with_system_viewer")
    def test_preview_opens_viewer_when_enabled(self, mock_open: Mock) -> None:
        dispatcher = CupsDispatcher(self.output_dir, open_preview=True)
        artifact = dispatcher.generate_print_artifact(_png(), 62, 30, None)
        mock_open.assert_called_once_with(Path(artifact))

    @patch("print_dispatch.subprocess.run")
    def test_print_invokes_lpr(self, mock_run: Mock) -> None:
        mock_run.return_value = _completed()
        result = self.dispatcher.generate_print_artifact(_png(), 62, 30, "Brother_QL")

        self.assertEqual(result, "Printed to Brother_QL")
        args = mock_run.call_args.args[0]
        self.assertEqual(args[:3], ["lpr", "-P", "Brother_QL"])
        self.assertIn("PageSize=Custom.620x300", args)
        self.assertIn("print-scaling=none", args)
        self.assertTrue(args[-1].endswith(".pdf"))

    @patch("print_dispatch.subprocess.run")
    def test_print_failure_carries_stderr(self, mock_run: Mock) -> None:
        mock_run.return_value = _completed(1, stderr="lpr: Unknown printer\n")
        with self.assertRaises(DispatchError) as ctx:
            self.dispatcher.generate_print_artifact(_png(), 62, 30, "Nope")
        self.assertEqual(str(ctx.exception), "Failed to print: lpr: Unknown printer")

    @patch("print_dispatch.subprocess.run", side_effect=FileNotFoundError("lpr"))
    def test_missing_lpr(self, _mock_run: Mock) -> None:
        with self.assertRaises(DispatchError):
            self.dispatcher.generate_print_artifact(_png(), 62, 30, "Brother_QL")

    def test_invalid_image_data(self) -> None:
        with self.assertRaises(DispatchError):
            self.dispatcher.generate_print_artifact(b"not a png", 62, 30, None)


class SystemViewerTests(unittest.TestCase):
    @patch("print_dispatch.sys.platform", "linux")
    @patch("print_dispatch.subprocess.run")
    def test_viewer_runs_to_completion(self, mock_run: Mock) -> None:
        mock_run.return_value = _completed()
        open_with_system_viewer(Path("/tmp/label_1.pdf"))
        self.assertEqual(mock_run.call_args.args[0], ["xdg-open", "/tmp/label_1.pdf"])

    @patch("print_dispatch.sys.platform", "darwin")
    @patch("print_dispatch.subprocess.run")
    def test_viewer_failure(self, mock_run: Mock) -> None:
        mock_run.return_value = _completed(4, stderr="no application knows how to open")
        with self.assertRaises(DispatchError) as ctx:
            open_with_system_viewer(Path("/tmp/label_1.pdf"))
        self.assertEqual(mock_run.call_args.args[0][0], "open")
        self.assertIn("Failed to open PDF", str(ctx.exception))


class ListPrintersTests(unittest.TestCase):
    @patch("print_dispatch.subprocess.run")
    def test_lines_are_trimmed(self, mock_run: Mock) -> None:
        mock_run.return_value = _completed(stdout="Brother_QL_820NWB\n   \n  Office \n")
        self.assertEqual(
            CupsDispatcher().list_printers(), ["Brother_QL_820NWB", "Office"])
        self.assertEqual(mock_run.call_args.args[0], ["lpstat", "-e"])

    @patch("print_dispatch.subprocess.run")
    def test_no_printers_is_not_an_error(self, mock_run: Mock) -> None:
        mock_run.return_value = _completed(stdout="")
        self.assertEqual(CupsDispatcher().list_printers(), [])

    @patch("print_dispatch.subprocess.run")
    def test_lpstat_failure(self, mock_run: Mock) -> None:
        mock_run.return_value = _completed(1, stderr="scheduler not running")
        with self.assertRaises(DispatchError):
            CupsDispatcher().list_printers()


if __name__ == "__main__":
    unittest.main()
