#! python3

## This program converts Sierra Adventure Game Interpreter (AGI) VIEW resources
## into bitmaps. Each view becomes one image that holds every cel in the view:
##  - Each loop is drawn as one row of the image, in loop order.
##  - The cels in each loop are drawn left to right, in cel order.
##  - Mirrored cels are drawn flipped, except in the loop that owns them.
##  - AGI pixels are double-wide, so every pixel is drawn twice horizontally.
## Views are converted one at a time. A view that fails to convert is reported
## and skipped; it does not stop the other views from converting.

from pathlib import Path
from typing import List
import os
import sys

from asset_extraction_framework.CommandLine import CommandLineArguments
from asset_extraction_framework.Application import Application

from AgiView.Compositor import ViewCompositor
from AgiView.Exceptions import EncodeFailureError, FormatError, SourceUnavailableError
from AgiView.View import View

VERSION = '1.0'

class AgiViewConverter(Application):
    ## Files inside directories are only converted when named like extracted
    ## view resources (VIEW.000, view.123, and so on).
    VIEW_FILENAME_REGEX = r'view\.\d+$'

    def __init__(self, application_name: str):
        super().__init__(application_name)
        self.converted_filepaths: List[str] = []
        self.failed_filepaths: List[str] = []

    ## Expands the input paths into the list of view files to convert.
    ## Files are converted no matter their name; directories are searched
    ## recursively for view resources.
    def find_view_files(self, input_paths: List[str]) -> List[str]:
        view_filepaths = []
        for input_path in input_paths:
            if os.path.isdir(input_path):
                matched_filepaths = self.find_matching_files([input_path], AgiViewConverter.VIEW_FILENAME_REGEX, case_sensitive = False)
                view_filepaths.extend(sorted(matched_filepaths))
            else:
                # Missing files are still queued, so they are reported like any other failure.
                view_filepaths.append(input_path)
        return view_filepaths

    def process(self, command_line_arguments):
        for view_filepath in self.find_view_files(command_line_arguments.input):
            try:
                self.convert(view_filepath, command_line_arguments)
                self.converted_filepaths.append(view_filepath)
            except (FormatError, SourceUnavailableError, EncodeFailureError) as error:
                print(f'ERROR: Could not convert {view_filepath}: {error}')
                self.failed_filepaths.append(view_filepath)

    ## Converts one view to a bitmap.
    ## By default the bitmap is written next to the view, named after the view
    ## (VIEW.000 becomes VIEW.000.bmp). If an export directory is provided,
    ## the bitmap is written there instead.
    def convert(self, view_filepath: str, command_line_arguments):
        print(f'INFO: Converting {view_filepath}')
        view = View(view_filepath)
        try:
            if command_line_arguments.debug:
                view.print_structure()

            # DRAW THE VIEW.
            compositor = ViewCompositor(view)
            if command_line_arguments.export:
                try:
                    Path(command_line_arguments.export).mkdir(parents = True, exist_ok = True)
                except OSError as error:
                    raise EncodeFailureError(f'Could not create export directory {command_line_arguments.export}: {error}') from error
                root_directory_path = command_line_arguments.export
                bitmap = compositor.composite(name = view.filename)
            else:
                root_directory_path = view_filepath
                bitmap = compositor.composite()

            # EXPORT THE BITMAP.
            bitmap.export(root_directory_path, command_line_arguments)
            if command_line_arguments.bitmap_format != 'none':
                exported_filepath = bitmap.export_filepath(root_directory_path, command_line_arguments.bitmap_format)
                print(f'INFO: Saved {exported_filepath}')
        finally:
            view.close()

## \return The process exit code: 0 if every view converted, 1 otherwise.
def main(raw_command_line: List[str] = None) -> int:
    APPLICATION_NAME = 'agiview'
    APPLICATION_DESCRIPTION = 'Convert Sierra Adventure Game Interpreter (AGI) View resources to bitmap'
    print(APPLICATION_NAME)
    print(APPLICATION_DESCRIPTION)
    print(f'Ver. {VERSION}\n')

    # PARSE THE COMMAND-LINE ARGUMENTS.
    command_line = CommandLineArguments(APPLICATION_NAME, APPLICATION_DESCRIPTION)
    if raw_command_line is None:
        raw_command_line = sys.argv[1:]
    if len(raw_command_line) == 0:
        # Having nothing to convert is not an error.
        command_line.argument_parser.print_usage()
        return 0
    command_line_arguments = command_line.parse(raw_command_line)

    # CONVERT THE VIEWS.
    converter = AgiViewConverter(APPLICATION_NAME)
    converter.process(command_line_arguments)
    if len(converter.failed_filepaths) > 0:
        print(f'WARNING: {len(converter.failed_filepaths)} view(s) could not be converted.')
        return 1
    return 0

if __name__ == '__main__':
    sys.exit(main())
