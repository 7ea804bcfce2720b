class LlmReplyPostProcessor:
    """Helper class to clean assistant replies before they are displayed"""

    BOLD_MARKER = "**"

    def __init__(self, text: str):
        self._text = text

    def strip_bold_markers(self) -> str:
        """
        Remove every literal ``**`` sequence.

        The model is asked not to use asterisk emphasis, but it still slips in;
        only the markers are removed, the emphasized words stay.

        :return: Text without bold markers
        """
        return self._text.replace(self.BOLD_MARKER, "")

    def process(self) -> str:
        self._text = self.strip_bold_markers()
        return self._text

    @property
    def text(self) -> str:
        return self._text
