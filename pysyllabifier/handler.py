from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Literal

from rich.progress import MofNCompleteColumn, Progress, SpinnerColumn, TimeElapsedColumn

from pysyllabifier.analysis import DEFAULT_METHOD
from pysyllabifier.console import create_region_table, format_duration, print_status, rich_console
from pysyllabifier.core import SyllableSegmenter
from pysyllabifier.utils import DEFAULT_OUTPUT_DIR, mk_outputdir

# Serializes output so parallel batch jobs do not interleave
_export_lock = threading.Lock()


class SegmentHandler:
    def __init__(
        self,
        *,
        path: str,
        method: str = DEFAULT_METHOD,
        max_db_drop: float | None = None,
        export_to: Literal["TABLE", "STDOUT", "TXT"] = "TABLE",
        fmt: Literal["SECONDS", "TIME"] = "SECONDS",
        output_dir: str | None = None,
        batch_mode: bool = False,
        **kwargs,
    ):
        self.filepath = path
        self.export_to = export_to.upper()
        self.fmt = fmt.lower()
        self.output_directory = output_dir
        self.batch_mode = batch_mode

        self._segmenter = SyllableSegmenter(path, method=method)
        logging.info(f'Loaded "{path}". Segmenting with the "{method}" method...')
        self.regions = self._segmenter.find_regions(max_db_drop=max_db_drop)

    @property
    def segmenter(self) -> SyllableSegmenter:
        """Returns the handler's SyllableSegmenter instance."""
        return self._segmenter

    def run(self):
        with _export_lock:
            self._export()

    def _export(self):
        if self.export_to == "TABLE":
            self.table_export_runner()
        elif self.export_to == "STDOUT":
            self.stdout_export_runner()
        elif self.export_to == "TXT":
            self.txt_export_runner()
        else:
            raise ValueError(f"Unknown export target: {self.export_to}")

    def table_export_runner(self):
        fmt = self._fmt
        rows = [(fmt(r.start), fmt(r.end), format_duration(r.duration)) for r in self.regions]
        title = f'Pseudosyllables in "{self.segmenter.filename}"\n({len(rows)} regions)'
        rich_console.print(create_region_table(title, rows))

    def stdout_export_runner(self):
        lines = [f"{self._fmt(r.start)} {self._fmt(r.end)}\n" for r in self.regions]
        rich_console.out(*lines, sep="", end="")

    def txt_export_runner(self):
        out_dir = mk_outputdir(self.filepath, self.output_directory)
        out_path = self.segmenter.export_txt(self.regions, output_dir=str(out_dir), fmt=self.fmt)
        message = f'Added {len(self.regions)} regions of "{self.segmenter.filename}" to "{out_path}"'
        if self.batch_mode:
            logging.info(message)
        elif self.regions:
            print_status(message)
        else:
            print_status(f'No pseudosyllables found in "{self.segmenter.filename}"', "warning")

    def _fmt(self, seconds: float) -> str:
        return self.segmenter.format_seconds(seconds, self.fmt)


class BatchHandler:
    def __init__(
        self,
        *,
        path: str,
        recursive: bool = False,
        jobs: int = 1,
        **kwargs,
    ):
        self.directory_path = os.path.abspath(path)
        self.recursive = recursive
        self.jobs = max(1, jobs)
        self.kwargs = kwargs

    def run(self):
        files = self.get_files_in_directory(self.directory_path, recursive=self.recursive)

        if len(files) == 0:
            raise FileNotFoundError(f'No files found in "{self.directory_path}"')

        with Progress(
            SpinnerColumn(),
            *Progress.get_default_columns(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=rich_console,
        ) as progress:
            pbar = progress.add_task("Processing...", total=len(files))
            with ThreadPoolExecutor(max_workers=self.jobs) as executor:
                futures = {
                    executor.submit(self._batch_segment_helper, path=file_path, **self.kwargs): file_path
                    for file_path in files
                }
                failures = 0
                for future in as_completed(futures):
                    failures += not future.result()
                    progress.update(
                        pbar,
                        advance=1,
                        description=(
                            f'Processed "{os.path.relpath(futures[future], self.directory_path)}"'
                        ),
                    )

        if failures:
            print_status(f"{failures} of {len(files)} files could not be segmented", "warning")
        else:
            print_status(f"Segmented {len(files)} files")

    @staticmethod
    def get_files_in_directory(dir_path: str, recursive: bool = False) -> list[str]:
        """Files to segment, skipping anything inside an export directory."""
        files = []
        for directory, sub_dirs, file_list in os.walk(dir_path):
            # Previous TXT exports live in DEFAULT_OUTPUT_DIR
            sub_dirs[:] = [d for d in sub_dirs if d != DEFAULT_OUTPUT_DIR] if recursive else []
            files.extend(os.path.join(directory, filename) for filename in file_list)
        return sorted(files)

    @staticmethod
    def _batch_segment_helper(**kwargs) -> bool:
        try:
            handler = SegmentHandler(**kwargs, batch_mode=True)
            handler.run()
        except Exception as e:
            logging.error(e)
            return False
        return True
