from pygments.style import Style
from pygments.token import Keyword, Name, Number, Punctuation, String, Token


class LogStyle(Style):
    """Muted palette for the JSON tail of log lines"""

    background_color = None
    styles = {
        Token: "",
        Punctuation: "#6c6c6c",
        Name.Tag: "#5f87af",
        String: "#87af87",
        String.Double: "#87af87",
        Number: "#d7af5f",
        Keyword.Constant: "#af87af",
    }
