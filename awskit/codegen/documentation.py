import re
import textwrap
import warnings
from typing import List, Optional

from bs4 import BeautifulSoup

DOC_WIDTH = 100


def html_to_text(html: Optional[str]) -> str:
    """
    Converts the HTML documentation of the service description into plain text paragraphs. Lists are rendered with
    ``-`` bullets, code with backticks.
    """
    if not html or not html.strip():
        return ""

    with warnings.catch_warnings():
        # short documentation strings trigger bs4 warnings about looking like file names or URLs
        warnings.simplefilter("ignore")
        soup = BeautifulSoup(html, "html.parser")

    for code in soup.find_all("code"):
        code.replace_with(f"`{code.get_text()}`")
    for item in soup.find_all("li"):
        item.insert_before("\n\n- ")
    for paragraph in soup.find_all("p"):
        # the first paragraph of a list item stays on the line of the bullet
        if paragraph.parent.name == "li" and paragraph.find_previous_sibling() is None:
            continue
        paragraph.insert_before("\n\n")

    text = soup.get_text()
    paragraphs = [re.sub(r"\s+", " ", p).strip() for p in re.split(r"\n\s*\n", text)]
    return "\n\n".join(p for p in paragraphs if p)


def escape_docstring(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


def wrap(text: str, indent: str, width: int = DOC_WIDTH) -> List[str]:
    lines = []
    for paragraph in text.split("\n\n"):
        if lines:
            lines.append("")
        subsequent = indent + "  " if paragraph.startswith("- ") else indent
        lines.extend(
            textwrap.wrap(
                paragraph,
                width=width,
                initial_indent=indent,
                subsequent_indent=subsequent,
                break_long_words=False,
                break_on_hyphens=False,
            )
        )
    return lines


def print_docstring(
    output,
    html: Optional[str],
    indent: str,
    extra_lines: List[str] = None,
    summary: bool = False,
) -> bool:
    """
    Writes the documentation as docstring into the output.

    :param output: the stream to write to
    :param html: the HTML documentation of the service description
    :param indent: the indentation of the docstring
    :param extra_lines: lines appended to the documentation (f.e. ``:param`` lines)
    :param summary: only write the first sentence of the documentation
    :return: True if a docstring was written
    """
    text = escape_docstring(first_sentence(html) if summary else html_to_text(html))
    if not text and not extra_lines:
        return False

    output.write(f'{indent}"""\n')
    for line in wrap(text, indent) if text else []:
        output.write(f"{line}\n" if line else "\n")
    if extra_lines:
        if text:
            output.write("\n")
        for line in extra_lines:
            output.write(f"{indent}{escape_docstring(line)}\n")
    output.write(f'{indent}"""\n')
    return True


def first_sentence(html: Optional[str]) -> str:
    text = html_to_text(html)
    if not text:
        return ""
    sentence = re.split(r"(?<=\.)\s", text.split("\n\n")[0], maxsplit=1)[0]
    return sentence
