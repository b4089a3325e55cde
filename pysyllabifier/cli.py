import logging
import os
import warnings

import rich_click as click
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TimeElapsedColumn
from rich.traceback import install as rich_traceback_handler

from pysyllabifier import __version__
from pysyllabifier.analysis import DEFAULT_METHOD, SYLLABIFIERS
from pysyllabifier.console import _OPTION_GROUPS, rich_console
from pysyllabifier.exceptions import AudioLoadError, UnknownSyllabifierError
from pysyllabifier.handler import BatchHandler, SegmentHandler
from pysyllabifier.utils import get_outputdir

# CLI --help styling
click.rich_click.OPTION_GROUPS = _OPTION_GROUPS
click.rich_click.USE_RICH_MARKUP = True
# End CLI styling


@click.group("pysyllabifier")
@click.option("--debug", "-d", is_flag=True, default=False, help="Enables debugging mode.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enables verbose logging output.")
@click.version_option(__version__, prog_name="pysyllabifier", message="%(prog)s %(version)s")
def cli_main(debug, verbose):
    """Segment speech recordings into pseudosyllables."""
    # Store flags in environ instead of passing them as parameters
    if debug:
        os.environ["PSYL_DEBUG"] = "1"
        warnings.simplefilter("default")
        rich_traceback_handler(console=rich_console, suppress=[click])
    else:
        warnings.filterwarnings("ignore")

    if verbose:
        os.environ["PSYL_VERBOSE"] = "1"

    level = logging.DEBUG if debug and verbose else logging.INFO if verbose else logging.ERROR
    if verbose:
        logging.basicConfig(format="%(message)s", level=level, handlers=[RichHandler(level=level, console=rich_console, rich_tracebacks=True, show_path=debug, show_time=False, tracebacks_suppress=[click])])
    else:
        logging.basicConfig(format="%(message)s", level=level, handlers=[RichHandler(level=level, console=rich_console, show_time=False, show_path=False)])


@cli_main.command()
@click.option("--path", type=click.Path(exists=True), required=True, help="Path to the audio file, or a directory of audio files.")
@click.option("--method", type=click.Choice(tuple(SYLLABIFIERS), case_sensitive=False), default=DEFAULT_METHOD, show_default=True, help="Segmentation method: band-envelope onsets ([cyan]envelope[/]) or a Gaussian mixture over intensity energy ([cyan]em[/]).")
@click.option("--max-db-drop", type=click.FloatRange(min=0, min_open=True), default=None, help="Drop regions whose peak intensity is more than this many dB below the loudest region. [dim](disabled by default; 25 is a typical value)[/]")
@click.option("--export-to", type=click.Choice(("TABLE", "STDOUT", "TXT"), case_sensitive=False), default="TABLE", show_default=True, help="TABLE: print a table of regions; STDOUT: print one 'start end' line per region; TXT: append regions to syllables.txt in the output directory.")
@click.option("--fmt", type=click.Choice(("SECONDS", "TIME"), case_sensitive=False), default="SECONDS", show_default=True, help="Format region boundaries as seconds or as time (mm:ss.sss).")
@click.option("--output-dir", "-o", type=click.Path(exists=False, writable=True, file_okay=False), help="The output directory to use for TXT exports.")
@click.option("--recursive", "-r", is_flag=True, default=False, help="Process directories recursively.")
@click.option("--jobs", "-j", type=click.IntRange(min=1), default=1, show_default=True, help="Number of files to segment in parallel when processing a directory.")
def segment(**kwargs):
    """Find the pseudosyllable regions of speech audio."""
    run_handler(**kwargs)


def run_handler(**kwargs):
    try:
        if kwargs["export_to"].upper() == "TXT":
            kwargs["output_dir"] = str(get_outputdir(kwargs["path"], kwargs["output_dir"]))

        if os.path.isfile(kwargs["path"]):
            with Progress(
                SpinnerColumn(),
                *Progress.get_default_columns(),
                TimeElapsedColumn(),
                console=rich_console,
                transient=True
            ) as progress:
                progress.add_task("Processing", total=None)
                handler = SegmentHandler(**kwargs)
            handler.run()
        else:
            batch_handler = BatchHandler(**kwargs)
            batch_handler.run()
    except (AudioLoadError, UnknownSyllabifierError, Exception) as e:
        print_exception(e)


def print_exception(e: Exception):
    if "PSYL_DEBUG" in os.environ:
        rich_console.print_exception(suppress=[click])
    else:
        logging.error(e)


if __name__ == "__main__":
    cli_main()
