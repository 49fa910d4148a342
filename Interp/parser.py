from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Command:
    """One parsed command: argv plus redirections and the background flag."""
    argv: List[str] = field(default_factory=list)
    input_path: Optional[str] = None
    output_path: Optional[str] = None
    background: bool = False

    @property
    def empty(self):
        return not self.argv

    def __str__(self):
        parts = list(self.argv)
        if self.input_path is not None:
            parts += ["<", self.input_path]
        if self.output_path is not None:
            parts += [">", self.output_path]
        if self.background:
            parts.append("&")
        return " ".join(parts)


def tokenize(text):
    """
    Split a command string on runs of whitespace.
    No quoting or escaping: 'echo "a b"' gives ['echo', '"a', 'b"'].
    """
    return text.split()


def build_command(tokens):
    """
    Build a Command from tokens, scanning left to right.
    '<' and '>' take the next token as filename, whatever it is.
    A marker with nothing after it is dropped.
    """
    cmd = Command()
    i = 0

    while i < len(tokens):
        tok = tokens[i]
        if tok == "<":
            if i + 1 < len(tokens):
                cmd.input_path = tokens[i + 1]
            i += 2
        elif tok == ">":
            if i + 1 < len(tokens):
                cmd.output_path = tokens[i + 1]
            i += 2
        elif tok == "&":
            cmd.background = True
            i += 1
        else:
            cmd.argv.append(tok)
            i += 1

    return cmd


def parse_command(text):
    return build_command(tokenize(text))


def split_statements(line):
    """Split an input line on ';' and drop blank segments."""
    return [seg for seg in line.split(";") if seg.strip()]


def split_pipeline(segment):
    """
    Parse a segment into pipeline stages (split on '|').
    Returns: list of Command, or [] if any stage is empty.

    Only the first stage keeps its input file and only the last stage
    keeps its output file; the pipeline runs in background if the last
    stage has '&'.
    """
    stages = [parse_command(part) for part in segment.split("|")]
    if any(st.empty for st in stages):
        return []

    last = len(stages) - 1
    for idx, st in enumerate(stages):
        if idx > 0:
            st.input_path = None
        if idx < last:
            st.output_path = None
            st.background = False

    return stages
