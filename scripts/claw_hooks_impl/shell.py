"""Shell parsing for claw-hooks.

Extracts the program invocations a shell command string would run. Pipelines,
command lists, subshells, command substitutions, wrappers such as ``sudo`` or
``xargs``, ``eval`` and ``bash -c`` scripts are all seen through. Quoted text
is only ever an argument, never a command of its own.
"""

import logging
import posixpath
import re
from dataclasses import dataclass, field
from typing import Iterator

logger = logging.getLogger(__name__)

MAX_DEPTH = 8

WRAPPERS = frozenset(
    {
        "busybox",
        "command",
        "doas",
        "env",
        "exec",
        "ionice",
        "nice",
        "nohup",
        "ltrace",
        "strace",
        "sudo",
        "time",
        "timeout",
        "xargs",
    }
)

SHELLS = frozenset({"bash", "sh", "zsh", "dash", "ksh", "csh", "tcsh", "fish"})

_RESERVED_WORDS = frozenset(
    {"if", "then", "else", "elif", "fi", "do", "done", "esac", "while", "until", "!"}
)

# Segments starting with these words hold loop/case headers, not commands.
_HEADER_WORDS = frozenset({"for", "select", "case"})

_ASSIGNMENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\[[^\]]*\])?\+?=")

# Options that consume the following token, per wrapper.
_WRAPPER_VALUE_FLAGS: dict[str, frozenset[str]] = {
    "sudo": frozenset(
        {
            "-u",
            "-g",
            "-C",
            "-D",
            "-R",
            "-T",
            "-h",
            "-p",
            "-r",
            "-t",
            "-U",
            "--user",
            "--group",
            "--chdir",
            "--chroot",
            "--close-from",
            "--command-timeout",
            "--host",
            "--other-user",
            "--prompt",
            "--role",
            "--type",
        }
    ),
    "doas": frozenset({"-u", "-C"}),
    "env": frozenset({"-u", "--unset", "-C", "--chdir", "-P"}),
    "exec": frozenset({"-a"}),
    "ionice": frozenset({"-c", "-n", "-p", "-P", "-u", "--class", "--classdata"}),
    "nice": frozenset({"-n", "--adjustment"}),
    "time": frozenset({"-f", "-o", "--format", "--output"}),
    "timeout": frozenset({"-k", "-s", "--kill-after", "--signal"}),
    "strace": frozenset(
        {"-a", "-b", "-e", "-E", "-I", "-o", "-O", "-p", "-P", "-s", "-S", "-u", "-X"}
    ),
    "ltrace": frozenset(
        {"-a", "-A", "-D", "-e", "-E", "-l", "-n", "-o", "-p", "-s", "-u", "-x", "-X"}
    ),
}

_XARGS_VALUE_FLAGS = frozenset(
    {
        "-a",
        "-I",
        "-J",
        "-L",
        "-l",
        "-n",
        "-R",
        "-S",
        "-s",
        "-P",
        "-d",
        "-E",
        "--arg-file",
        "--delimiter",
        "--eof",
        "--max-args",
        "--max-lines",
        "--max-procs",
        "--max-chars",
        "--process-slot-var",
    }
)

_FIND_EXEC_ACTIONS = frozenset({"-exec", "-execdir", "-ok", "-okdir"})

_SHELL_DASH_C_LETTERS = frozenset({"c", "e", "i", "l", "s", "u", "x"})

_CASE_WORD = re.compile(r"(case|esac|in)(?=[\s;&|()]|$)")
_WORD_BOUNDARY = frozenset(" \t\n;&|(")

_OPERATORS = ("&&", "||", "|&", ";;", ";", "|", "&", "\n", "(", ")")
_REDIRECTS = ("<<<", "<<-", "<<", "<>", "<&", ">>", ">&", ">|", "<", ">")


class ShellSyntaxError(ValueError):
    """Raised when a command string cannot be split structurally."""


@dataclass(frozen=True)
class Invocation:
    """One program call found in a command string."""

    command: str
    args: tuple[str, ...] = ()
    wrappers: tuple[str, ...] = ()
    raw_command: str = ""

    @property
    def line(self) -> str:
        return " ".join((self.command, *self.args))


@dataclass(frozen=True)
class ParsedCommand:
    """Invocations of a command string, in textual discovery order."""

    raw: str
    invocations: tuple[Invocation, ...] = ()
    degraded: bool = False
    depth_exceeded: bool = False

    def __iter__(self) -> Iterator[Invocation]:
        return iter(self.invocations)

    def __len__(self) -> int:
        return len(self.invocations)

    def commands(self) -> list[str]:
        return [invocation.command for invocation in self.invocations]


def normalize_command(token: str) -> str:
    """Strip any leading path and lower-case a command token."""
    name = posixpath.basename(token).lower()
    if name.endswith(".exe"):
        name = name[:-4]
    return name


def parse(raw: str, max_depth: int = MAX_DEPTH) -> ParsedCommand:
    """Parse a raw shell command string into the invocations it would run.

    Never raises. When the string cannot be split structurally (unterminated
    quote or substitution, unbalanced parenthesis) the first whitespace token
    is reported as the only command, so blocking rules still see the obvious
    case. Nesting through wrappers, ``-c`` scripts and substitutions is
    bounded by ``max_depth``; anything deeper is dropped and flagged.
    """
    walker = _Walker(max_depth)
    walker.script(raw, (), 0)
    return ParsedCommand(
        raw=raw,
        invocations=tuple(walker.invocations),
        degraded=walker.degraded,
        depth_exceeded=walker.depth_exceeded,
    )


def unquoted_text(raw: str) -> str:
    """Return ``raw`` with the contents of every quoted region removed.

    Quote delimiters are kept so word boundaries survive. An unterminated
    quote blanks the rest of the string.
    """
    out: list[str] = []
    quote: str | None = None
    i = 0
    while i < len(raw):
        ch = raw[i]
        if quote is None:
            if ch == "\\":
                out.append(raw[i : i + 2])
                i += 2
                continue
            if ch in {"'", '"'}:
                quote = ch
            out.append(ch)
        elif ch == quote:
            quote = None
            out.append(ch)
        elif ch == "\\" and quote == '"':
            i += 2
            continue
        i += 1
    return "".join(out)


# --- Lexing ---------------------------------------------------------------


@dataclass
class _Word:
    text: str
    quoted: bool = False
    subs: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class _Operator:
    value: str


@dataclass(frozen=True)
class _Redirect:
    value: str


_Token = _Word | _Operator | _Redirect


def _skip_single_quote(text: str, start: int) -> int:
    end = text.find("'", start)
    if end < 0:
        raise ShellSyntaxError("unterminated single quote")
    return end + 1


def _skip_double_quote(text: str, start: int) -> int:
    i = start
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            return i + 1
        i += 1
    raise ShellSyntaxError("unterminated double quote")


def _find_backtick(text: str, start: int) -> int:
    i = start
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == "`":
            return i
        i += 1
    raise ShellSyntaxError("unterminated backtick substitution")


def _at_command_start(text: str, i: int) -> bool:
    before = text[:i].rstrip(" \t")
    if not before or before[-1] in ";&|(\n{":
        return True
    return before.rsplit(None, 1)[-1] in {"then", "do", "else", "!"}


def _find_closing(text: str, start: int, open_ch: str, close_ch: str) -> int:
    """Return the index closing a group whose opener sits just before ``start``.

    For parentheses, the ``)`` ending a ``case`` pattern does not close the
    group.
    """
    depth = 1
    # (paren depth, state) per open case; state is subject, pattern or body.
    cases: list[tuple[int, str]] = []
    i = start
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "'":
            i = _skip_single_quote(text, i + 1)
            continue
        if ch == '"':
            i = _skip_double_quote(text, i + 1)
            continue
        if ch == "`":
            i = _find_backtick(text, i + 1) + 1
            continue
        if open_ch == "(" and text[i - 1] in _WORD_BOUNDARY:
            m = _CASE_WORD.match(text, i)
            if m:
                word = m.group(1)
                if word == "case":
                    if _at_command_start(text, i):
                        cases.append((depth, "subject"))
                elif cases and cases[-1][0] == depth:
                    state = cases[-1][1]
                    if word == "in" and state == "subject":
                        cases[-1] = (depth, "pattern")
                    elif word == "esac" and state != "subject":
                        cases.pop()
                i = m.end()
                continue
        if cases and cases[-1][0] == depth:
            if text.startswith((";;", ";&"), i):
                cases[-1] = (depth, "pattern")
                i += 3 if text.startswith(";;&", i) else 2
                continue
            if cases[-1][1] == "pattern" and ch in {"(", ")"}:
                if ch == ")":
                    cases[-1] = (depth, "body")
                i += 1
                continue
        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    raise ShellSyntaxError(f"unterminated {open_ch!r} group")


def _expansion_substitutions(body: str, *, arithmetic: bool = False) -> list[str]:
    """Return the command substitutions nested in a ``${...}`` or ``$((...))`` body.

    Quotes are not honored here: inside double quotes a single quote in the
    body is literal, so every substitution is assumed to run.
    """
    subs: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\":
            i += 2
            continue
        if body.startswith("$((", i):
            end = _find_closing(body, i + 2, "(", ")")
            subs.extend(_expansion_substitutions(body[i + 2 : end], arithmetic=True))
            i = end + 1
        elif body.startswith("$(", i):
            end = _find_closing(body, i + 2, "(", ")")
            subs.append(body[i + 2 : end])
            i = end + 1
        elif body.startswith("${", i):
            end = _find_closing(body, i + 2, "{", "}")
            subs.extend(_expansion_substitutions(body[i + 2 : end]))
            i = end + 1
        elif ch == "`":
            end = _find_backtick(body, i + 1)
            subs.append(body[i + 1 : end].replace("\\`", "`"))
            i = end + 1
        elif not arithmetic and body.startswith(("<(", ">("), i):
            end = _find_closing(body, i + 2, "(", ")")
            subs.append(body[i + 2 : end])
            i = end + 1
        else:
            i += 1
    return subs


class _Lexer:
    """Quote-aware state machine splitting a script into words and operators."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.tokens: list[_Token] = []
        self._buf: list[str] = []
        self._subs: list[str] = []
        self._quoted = False
        self._in_word = False
        self._heredoc_op: str | None = None
        self._heredocs: list[tuple[str, bool]] = []

    def run(self) -> list[_Token]:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch in {" ", "\t", "\r"}:
                self._flush()
                self.pos += 1
            elif ch == "\\":
                self._backslash()
            elif ch == "#" and not self._in_word:
                end = text.find("\n", self.pos)
                self.pos = len(text) if end < 0 else end
            elif ch == "'":
                end = _skip_single_quote(text, self.pos + 1)
                self._append(text[self.pos + 1 : end - 1], quoted=True)
                self.pos = end
            elif ch == '"':
                self._double_quote()
            elif ch == "$":
                self._dollar()
            elif ch == "`":
                end = _find_backtick(text, self.pos + 1)
                self._subs.append(text[self.pos + 1 : end].replace("\\`", "`"))
                self._append(text[self.pos : end + 1])
                self.pos = end + 1
            elif ch in {"<", ">"}:
                self._angle()
            elif ch in {";", "|", "&", "(", ")", "\n"}:
                self._operator()
            else:
                self._append(ch)
                self.pos += 1
        self._flush()
        return self.tokens

    def _append(self, chunk: str, *, quoted: bool = False) -> None:
        self._buf.append(chunk)
        self._in_word = True
        if quoted:
            self._quoted = True

    def _reset_word(self) -> None:
        self._buf = []
        self._subs = []
        self._quoted = False
        self._in_word = False

    def _flush(self) -> None:
        if not self._in_word:
            return
        word = _Word("".join(self._buf), self._quoted, self._subs)
        if self._heredoc_op is not None:
            self._heredocs.append((word.text, self._heredoc_op == "<<-"))
            self._heredoc_op = None
        self.tokens.append(word)
        self._reset_word()

    def _backslash(self) -> None:
        nxt = self.text[self.pos + 1 : self.pos + 2]
        if nxt and nxt != "\n":
            self._append(nxt, quoted=True)
        self.pos += 2

    def _double_quote(self) -> None:
        text = self.text
        parts: list[str] = []
        i = self.pos + 1
        while i < len(text):
            ch = text[i]
            if ch == '"':
                self._append("".join(parts), quoted=True)
                self.pos = i + 1
                return
            if ch == "\\" and i + 1 < len(text) and text[i + 1] in '$`"\\\n':
                if text[i + 1] != "\n":
                    parts.append(text[i + 1])
                i += 2
                continue
            # Command substitutions still run inside double quotes; the
            # text around them stays one literal word.
            if text.startswith("$(", i) or text.startswith("${", i):
                close = ")" if text[i + 1] == "(" else "}"
                end = _find_closing(text, i + 2, text[i + 1], close)
                body = text[i + 2 : end]
                if close == "}":
                    self._subs.extend(_expansion_substitutions(body))
                elif text.startswith("$((", i):
                    self._subs.extend(_expansion_substitutions(body, arithmetic=True))
                else:
                    self._subs.append(body)
                parts.append(text[i : end + 1])
                i = end + 1
                continue
            if ch == "`":
                end = _find_backtick(text, i + 1)
                self._subs.append(text[i + 1 : end].replace("\\`", "`"))
                parts.append(text[i : end + 1])
                i = end + 1
                continue
            parts.append(ch)
            i += 1
        raise ShellSyntaxError("unterminated double quote")

    def _dollar(self) -> None:
        text = self.text
        pos = self.pos
        if text.startswith("$'", pos):
            parts: list[str] = []
            i = pos + 2
            while i < len(text):
                if text[i] == "\\" and i + 1 < len(text):
                    parts.append(text[i + 1])
                    i += 2
                    continue
                if text[i] == "'":
                    self._append("".join(parts), quoted=True)
                    self.pos = i + 1
                    return
                parts.append(text[i])
                i += 1
            raise ShellSyntaxError("unterminated $'...' quote")
        if text.startswith("$((", pos):
            # Arithmetic expansion: literal apart from nested substitutions.
            end = _find_closing(text, pos + 2, "(", ")")
            self._subs.extend(
                _expansion_substitutions(text[pos + 2 : end], arithmetic=True)
            )
            self._append(text[pos : end + 1])
            self.pos = end + 1
            return
        if text.startswith("$(", pos):
            end = _find_closing(text, pos + 2, "(", ")")
            self._subs.append(text[pos + 2 : end])
            self._append(text[pos : end + 1])
            self.pos = end + 1
            return
        if text.startswith("${", pos):
            end = _find_closing(text, pos + 2, "{", "}")
            self._subs.extend(_expansion_substitutions(text[pos + 2 : end]))
            self._append(text[pos : end + 1])
            self.pos = end + 1
            return
        self._append("$")
        self.pos += 1

    def _angle(self) -> None:
        text = self.text
        pos = self.pos
        if text.startswith("<(", pos) or text.startswith(">(", pos):
            # Process substitution.
            end = _find_closing(text, pos + 2, "(", ")")
            self._subs.append(text[pos + 2 : end])
            self._append(text[pos : end + 1])
            self.pos = end + 1
            return

        buffered = "".join(self._buf)
        if self._in_word and not self._quoted and not self._subs and buffered.isdigit():
            # File descriptor prefix such as the 2 in 2>&1.
            self._reset_word()
        else:
            self._flush()

        op = next(op for op in _REDIRECTS if text.startswith(op, pos))
        self.tokens.append(_Redirect(op))
        self.pos += len(op)
        if op in {"<<", "<<-"}:
            self._heredoc_op = op

    def _operator(self) -> None:
        text = self.text
        self._flush()
        if text.startswith("&>", self.pos):
            op = "&>>" if text.startswith("&>>", self.pos) else "&>"
            self.tokens.append(_Redirect(op))
            self.pos += len(op)
            return

        op = next(op for op in _OPERATORS if text.startswith(op, self.pos))
        self.tokens.append(_Operator(op))
        self.pos += len(op)
        if op == "\n" and self._heredocs:
            self._skip_heredoc_bodies()

    def _skip_heredoc_bodies(self) -> None:
        text = self.text
        for delimiter, strip_tabs in self._heredocs:
            while self.pos < len(text):
                end = text.find("\n", self.pos)
                line = text[self.pos :] if end < 0 else text[self.pos : end]
                self.pos = len(text) if end < 0 else end + 1
                if (line.lstrip("\t") if strip_tabs else line) == delimiter:
                    break
        self._heredocs = []


def _split_segments(text: str) -> list[tuple[list[str], list[str]]]:
    """Split a script into simple-command segments.

    Returns ``(argv, substitutions)`` pairs. Redirections and their targets
    are dropped from ``argv``; substitutions found anywhere in the segment,
    redirect targets included, are kept.
    """
    tokens = _Lexer(text).run()

    raw_segments: list[list[_Token]] = []
    segment: list[_Token] = []
    paren_depth = 0
    case_depth = 0
    # Set after `case ... in` and after `;;`, until the pattern's `)`.
    in_pattern = False
    for tok in tokens:
        at_command_position = not any(isinstance(t, _Word) for t in segment)
        if isinstance(tok, _Operator):
            if tok.value == "(":
                if in_pattern:
                    # Optional leading paren of a case pattern.
                    continue
                paren_depth += 1
            elif tok.value == ")":
                if in_pattern or paren_depth == 0:
                    if case_depth == 0:
                        raise ShellSyntaxError("unbalanced ')'")
                    # A case pattern such as `*)`, not a command.
                    segment = []
                    in_pattern = False
                    continue
                paren_depth -= 1
            elif tok.value == ";;" and case_depth:
                in_pattern = True
            raw_segments.append(segment)
            segment = []
            continue
        if isinstance(tok, _Word) and not tok.quoted:
            if at_command_position:
                if tok.text in {"{", "}"}:
                    continue
                if tok.text == "case":
                    case_depth += 1
                elif tok.text == "esac":
                    case_depth = max(case_depth - 1, 0)
                    in_pattern = False
            elif (
                tok.text == "in"
                and case_depth
                and isinstance(segment[0], _Word)
                and segment[0].text == "case"
            ):
                in_pattern = True
        segment.append(tok)
    raw_segments.append(segment)
    if paren_depth:
        raise ShellSyntaxError("unbalanced '('")

    segments: list[tuple[list[str], list[str]]] = []
    for raw_segment in raw_segments:
        argv: list[str] = []
        subs: list[str] = []
        skip_target = False
        for tok in raw_segment:
            if isinstance(tok, _Redirect):
                skip_target = True
                continue
            if not isinstance(tok, _Word):
                continue
            subs.extend(tok.subs)
            if skip_target:
                skip_target = False
                continue
            argv.append(tok.text)
        if argv or subs:
            segments.append((argv, subs))
    return segments


# --- Unwrapping -----------------------------------------------------------


def _strip_token_wrappers(token: str) -> str:
    tok = token.strip()
    while tok.startswith("$("):
        tok = tok[2:]
    tok = tok.lstrip("\\`({[\"'")
    tok = tok.rstrip("`)}]\"';")
    return tok


def _strip_prefix_words(argv: list[str]) -> list[str]:
    i = 0
    while i < len(argv):
        tok = argv[i]
        if tok in _RESERVED_WORDS or _ASSIGNMENT.match(tok):
            i += 1
            continue
        break
    return argv[i:]


def _unwrap(wrapper: str, args: list[str]) -> list[str]:
    """Return the command line a wrapper runs, with its own options removed."""
    value_flags = _WRAPPER_VALUE_FLAGS.get(wrapper, frozenset())
    split_string: list[str] = []
    i = 0
    while i < len(args):
        tok = args[i]
        if tok == "--":
            i += 1
            break
        if not tok.startswith("-") or tok == "-":
            break
        if wrapper == "command" and not tok.startswith("--"):
            if "v" in tok or "V" in tok:
                # `command -v` only looks the name up.
                return []
        if wrapper == "env":
            if tok in {"-S", "--split-string"} and i + 1 < len(args):
                split_string = args[i + 1].split()
                i += 2
                continue
            if tok.startswith("--split-string="):
                split_string = tok.split("=", 1)[1].split()
                i += 1
                continue
        if tok in value_flags:
            i += 2
            continue
        i += 1

    rest = split_string + args[i:]
    if wrapper == "timeout" and rest:
        rest = rest[1:]
    return rest


def _xargs_child_command(args: list[str]) -> list[str] | None:
    """Return the command tokens `xargs` will execute, or None if unspecified.

    Best-effort scan over xargs options; it does not model platform-specific
    xargs behavior. Attached option values (`-I{}`, `-n1`, `--max-args=2`)
    take a single token.
    """
    i = 0
    while i < len(args):
        tok = args[i]
        if tok == "--":
            i += 1
            break
        if not tok.startswith("-") or tok == "-":
            break
        if tok in _XARGS_VALUE_FLAGS:
            i += 2
            continue
        i += 1

    if i >= len(args):
        return None
    return args[i:]


def _find_exec_commands(args: list[str]) -> Iterator[list[str]]:
    i = 0
    while i < len(args):
        if args[i] in _FIND_EXEC_ACTIONS:
            start = i + 1
            i += 1
            while i < len(args) and args[i] not in {";", "+"}:
                i += 1
            if i > start:
                yield args[start:i]
        i += 1


def _dash_c_script(args: list[str]) -> str | None:
    # Handles: <shell> -c 'cmd', <shell> -lc 'cmd', <shell> --norc -c 'cmd',
    # <shell> -c -- 'cmd'. With -c the first operand is the script.
    dash_c = False
    i = 0
    while i < len(args):
        tok = args[i]
        if tok in {"--", "-"}:
            if dash_c and i + 1 < len(args):
                return args[i + 1]
            return None
        if tok in {"-o", "+o", "-O", "+O"}:
            i += 2
            continue
        if tok.startswith("-") and len(tok) > 1 and tok[1:].isalpha():
            letters = set(tok[1:])
            if "c" in letters and letters <= _SHELL_DASH_C_LETTERS:
                dash_c = True
        elif not tok.startswith(("-", "+")):
            # Without -c this is a script file; anything after it is its own.
            return tok if dash_c else None
        i += 1
    return None


def _coproc_command(args: list[str]) -> list[str]:
    # coproc cmd, coproc { cmd; }, coproc NAME { cmd; }
    if args and args[0] == "{":
        return args[1:]
    if len(args) > 1 and args[1] == "{":
        return args[2:]
    return args


class _Walker:
    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth
        self.invocations: list[Invocation] = []
        self.degraded = False
        self.depth_exceeded = False

    def _too_deep(self, depth: int, what: str) -> bool:
        if depth <= self.max_depth:
            return False
        if not self.depth_exceeded:
            logger.debug("nesting deeper than %d, dropping %r", self.max_depth, what)
        self.depth_exceeded = True
        return True

    def script(self, text: str, wrappers: tuple[str, ...], depth: int) -> None:
        if self._too_deep(depth, text):
            return
        try:
            segments = _split_segments(text)
        except ShellSyntaxError as exc:
            logger.debug("cannot split %r (%s); using first word only", text, exc)
            self.degraded = True
            words = text.split()
            head = normalize_command(_strip_token_wrappers(words[0])) if words else ""
            if head:
                self.invocations.append(Invocation(head, (), wrappers, words[0]))
            return

        for argv, subs in segments:
            self.simple_command(argv, wrappers, depth)
            # The shell expands substitutions before any wrapper runs.
            for sub in subs:
                self.script(sub, (), depth + 1)

    def simple_command(
        self, argv: list[str], wrappers: tuple[str, ...], depth: int
    ) -> None:
        if self._too_deep(depth, " ".join(argv)):
            return
        argv = _strip_prefix_words(argv)
        if not argv or argv[0] in _HEADER_WORDS:
            return
        command = normalize_command(argv[0])
        if not command:
            return
        args = argv[1:]
        self.invocations.append(Invocation(command, tuple(args), wrappers, argv[0]))

        inner = wrappers + (command,)
        if command == "xargs":
            child = _xargs_child_command(args)
            if child:
                self.simple_command(child, inner, depth + 1)
        elif command == "find":
            for child in _find_exec_commands(args):
                self.simple_command(child, inner, depth + 1)
        elif command in WRAPPERS:
            rest = _unwrap(command, args)
            if rest:
                self.simple_command(rest, inner, depth + 1)
        elif command in SHELLS:
            script = _dash_c_script(args)
            if script is not None:
                self.script(script, inner, depth + 1)
        elif command == "eval":
            # eval joins its arguments with spaces and runs the result.
            if args:
                self.script(" ".join(args), inner, depth + 1)
        elif command == "coproc":
            rest = _coproc_command(args)
            if rest:
                self.simple_command(rest, inner, depth + 1)
