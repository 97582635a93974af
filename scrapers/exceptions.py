class ThemeFileError(Exception):
    """The theme definition file couldn't be downloaded or understood."""

    def __init__(self, message, url=None):
        self.message = message
        self.url = url
        super().__init__(self.message)


class IconSamplingError(Exception):
    """The theme icon couldn't be downloaded or sampled for a color."""
