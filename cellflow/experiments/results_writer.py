import os

class ResultsWriter:
    """Appends one row per parameter pair to a delimited file.

    A row is ``p=<power>;k=<threshold>,<v1>,<v2>,...`` with one value per
    completed vehicle count. The file is opened in append mode for every
    write so partial sweeps survive an interrupted experiment.
    """

    def __init__(self, path: str, delimiter: str = ","):
        self.path = path
        self.delimiter = delimiter
        self.row_open = False

    def _append(self, text: str):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "a") as f:
            f.write(text)
            f.flush()

    def start_row(self, power: float, threshold: float):
        if self.row_open:
            self.end_row()
        self._append(f"p={power};k={threshold}{self.delimiter}")
        self.row_open = True

    def append_value(self, value: float):
        self._append(f"{value}{self.delimiter}")

    def end_row(self):
        if self.row_open:
            self._append("\n")
            self.row_open = False
