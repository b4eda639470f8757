"""Exceptions raised outside the (never failing) extraction core."""


class SpecLoadError(RuntimeError):
    """The specification file or URL could not be read or parsed."""


class GraphFormatError(ValueError):
    """A persisted graph file does not have the expected structure."""


class GraphIntegrityError(ValueError):
    """An edge points at something the graph does not contain."""

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__(
            f"{len(self.problems)} integrity problem(s): " + "; ".join(self.problems[:5])
        )
