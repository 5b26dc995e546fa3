from __future__ import annotations

import argparse
import logging
import signal
import tkinter as tk
from dataclasses import dataclass
from typing import Sequence

from .bits import BIT_OP_BUTTONS, CAPACITY, WIDTHS, BitContainer, mask_for
from .distribution import ZONES, map_position
from .formats import BASES, READ_ONLY_BASES, TITLES, decode, encode, format_state, group_digits
from .ieee754 import describe_float, decode_float
from .special_values import SPECIAL_VALUES, special_value

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 64

UI_FONT = ("DejaVu Sans", 11)
UI_FONT_BOLD = ("DejaVu Sans", 11, "bold")
TITLE_FONT = ("DejaVu Sans", 19, "bold")
ENTRY_FONT = ("DejaVu Sans Mono", 14)
BIT_FONT = ("DejaVu Sans Mono", 11, "bold")
BIT_INDEX_FONT = ("DejaVu Sans Mono", 7)
ZONE_FONT = ("DejaVu Sans", 9)

BG = "#f5f7fa"
PANEL_BG = "#ffffff"
BIT_ON_BG = "#2e86de"
BIT_OFF_BG = "#f7fbff"
BIT_INACTIVE_BG = "#dfe4ea"
ZONE_COLOURS = ("#f5b7b1", "#fad7a0", "#abebc6", "#abebc6", "#fad7a0", "#f5b7b1")

BITS_PER_ROW = 32
PLOT_HEIGHT = 56
PLOT_PADDING = 12

IEEE_READOUT: tuple[tuple[str, str], ...] = (
    ("format", "Format:"),
    ("sign", "Sign:"),
    ("exponent", "Exponent:"),
    ("mantissa", "Mantissa:"),
    ("type", "Type:"),
    ("value", "Value:"),
    ("fields", "Fields:"),
    ("formula", "Formula:"),
)


def bit_cell_style(bit_index: int, width: int, raw: int) -> tuple[str, str, str]:
    """Return (text, background, foreground) for one bit grid cell."""
    is_set = ((raw & mask_for(width)) >> bit_index) & 1 == 1
    text = "1" if is_set else "0"
    if bit_index >= width:
        return text, BIT_INACTIVE_BG, "#95a5a6"
    if is_set:
        return text, BIT_ON_BG, "#ffffff"
    return text, BIT_OFF_BG, "#1f2d3d"


def marker_x(position: float, canvas_width: int, padding: int = PLOT_PADDING) -> float:
    usable = max(1, canvas_width - 2 * padding)
    clamped = min(max(position, 0.0), 100.0)
    return padding + usable * clamped / 100.0


def status_text(raw: int, width: int) -> str:
    digits = format(raw & mask_for(width), f"0{width}b")
    return f"{width}-bit: {group_digits(digits, 8, ' ')}"


@dataclass
class BaseField:
    base: str
    entry: tk.Entry
    _default_bg: str

    def set_invalid(self, is_invalid: bool) -> None:
        if is_invalid:
            self.entry.configure(
                bg="#ffeaea", highlightthickness=2, highlightbackground="#cc4444"
            )
        else:
            self.entry.configure(
                bg=self._default_bg, highlightthickness=1, highlightbackground="#b8b8b8"
            )


class BitViewerApp(tk.Tk):
    def __init__(self, width: int = DEFAULT_WIDTH, value: int = 0) -> None:
        super().__init__()
        self.title("Bit Viewer")
        self.geometry("1180x820")
        self.minsize(960, 700)
        self.configure(bg=BG)

        self.container = BitContainer(value & mask_for(width))
        self.width_var = tk.IntVar(value=width)
        self._programmatic = False
        self.vars = {base: tk.StringVar() for base in BASES}
        self.fields: dict[str, BaseField] = {}
        self.bit_cells: dict[int, tk.Label] = {}
        self.special_buttons: dict[str, tk.Button] = {}
        self.readout_vars = {key: tk.StringVar() for key, _ in IEEE_READOUT}
        self.status_var = tk.StringVar()
        self.plot: tk.Canvas | None = None

        self._build_ui()
        self._wire_events()
        self._install_signal_handlers()
        self._refresh()

    @property
    def active_width(self) -> int:
        return int(self.width_var.get())

    def _build_ui(self) -> None:
        root = tk.Frame(self, bg=BG)
        root.pack(fill="both", expand=True, padx=16, pady=12)

        tk.Label(
            root, text="Bit Viewer", bg=BG, fg="#1d2a38", font=TITLE_FONT
        ).pack(anchor="w")

        selector = tk.Frame(root, bg=BG)
        selector.pack(anchor="w", pady=(6, 6))
        tk.Label(selector, text="Bit Size:", bg=BG, font=UI_FONT_BOLD).pack(side="left")
        for size in WIDTHS:
            tk.Radiobutton(
                selector,
                text=str(size),
                value=size,
                variable=self.width_var,
                command=self._on_width_change,
                bg=BG,
                font=UI_FONT,
                takefocus=False,
            ).pack(side="left", padx=(6, 0))

        self._build_bit_grid(root)
        self._build_base_fields(root)
        self._build_buttons(root)
        self._build_readout(root)
        self._build_plot(root)

        tk.Label(
            root,
            textvariable=self.status_var,
            bg=BG,
            fg="#3f5368",
            anchor="w",
            font=("DejaVu Sans Mono", 10),
        ).pack(fill="x", pady=(8, 0))

    def _build_bit_grid(self, parent: tk.Widget) -> None:
        grid = tk.Frame(parent, bg=PANEL_BG, bd=1, relief="solid", padx=6, pady=6)
        grid.pack(fill="x", pady=(0, 8))

        for slot, bit_index in enumerate(range(CAPACITY - 1, -1, -1)):
            row, col = divmod(slot, BITS_PER_ROW)
            gap = 6 if col and col % 8 == 0 else 1
            tk.Label(
                grid,
                text=str(bit_index),
                bg=PANEL_BG,
                fg="#c0392b",
                font=BIT_INDEX_FONT,
            ).grid(row=row * 2, column=col, padx=(gap, 1))
            cell = tk.Label(
                grid,
                text="0",
                width=2,
                relief="solid",
                bd=1,
                font=BIT_FONT,
                cursor="hand2",
            )
            cell.grid(row=row * 2 + 1, column=col, padx=(gap, 1), pady=(0, 4))
            cell.bind("<Button-1>", lambda _event, idx=bit_index: self._on_bit_click(idx))
            self.bit_cells[bit_index] = cell

    def _build_base_fields(self, parent: tk.Widget) -> None:
        frame = tk.Frame(parent, bg=PANEL_BG, bd=1, relief="solid", padx=10, pady=8)
        frame.pack(fill="x", pady=(0, 8))

        for row, base in enumerate(BASES):
            tk.Label(
                frame,
                text=TITLES[base],
                width=8,
                anchor="w",
                bg=PANEL_BG,
                fg="#34495e",
                font=UI_FONT_BOLD,
            ).grid(row=row, column=0, sticky="w")
            entry = tk.Entry(
                frame,
                textvariable=self.vars[base],
                font=ENTRY_FONT,
                bd=1,
                relief="solid",
                highlightthickness=1,
                highlightbackground="#b8b8b8",
            )
            entry.grid(row=row, column=1, sticky="ew", pady=2)
            if base in READ_ONLY_BASES:
                entry.configure(state="readonly")
            self.fields[base] = BaseField(base=base, entry=entry, _default_bg=entry.cget("bg"))
        frame.columnconfigure(1, weight=1)

    def _build_buttons(self, parent: tk.Widget) -> None:
        ops_row = tk.Frame(parent, bg=BG)
        ops_row.pack(fill="x", pady=(0, 4))
        tk.Label(ops_row, text="Bit Ops:", width=16, anchor="w", bg=BG, font=UI_FONT_BOLD).pack(
            side="left"
        )
        for label, op in BIT_OP_BUTTONS:
            tk.Button(
                ops_row,
                text=label,
                command=lambda name=op: self._on_bit_op(name),
                font=UI_FONT,
                takefocus=False,
            ).pack(side="left", padx=(0, 4))

        special_row = tk.Frame(parent, bg=BG)
        special_row.pack(fill="x", pady=(0, 8))
        tk.Label(
            special_row, text="Special Values:", width=16, anchor="w", bg=BG, font=UI_FONT_BOLD
        ).pack(side="left")
        for label in SPECIAL_VALUES:
            button = tk.Button(
                special_row,
                text=label,
                command=lambda name=label: self._on_special_value(name),
                font=UI_FONT,
                takefocus=False,
            )
            button.pack(side="left", padx=(0, 4))
            self.special_buttons[label] = button

    def _build_readout(self, parent: tk.Widget) -> None:
        frame = tk.LabelFrame(
            parent,
            text="IEEE 754",
            font=UI_FONT_BOLD,
            bg=PANEL_BG,
            bd=1,
            relief="solid",
            padx=10,
            pady=6,
        )
        frame.pack(fill="x", pady=(0, 8))
        for row, (key, label) in enumerate(IEEE_READOUT):
            tk.Label(
                frame, text=label, width=10, anchor="w", bg=PANEL_BG, font=UI_FONT_BOLD
            ).grid(row=row, column=0, sticky="w")
            value_entry = tk.Entry(
                frame,
                textvariable=self.readout_vars[key],
                relief="flat",
                bd=0,
                highlightthickness=0,
                font=("DejaVu Sans Mono", 11),
                readonlybackground=PANEL_BG,
            )
            value_entry.configure(state="readonly")
            value_entry.grid(row=row, column=1, sticky="ew")
        frame.columnconfigure(1, weight=1)

    def _build_plot(self, parent: tk.Widget) -> None:
        self.plot = tk.Canvas(
            parent, bg=PANEL_BG, height=PLOT_HEIGHT, bd=1, relief="solid", highlightthickness=0
        )
        self.plot.pack(fill="x")
        self.plot.bind("<Configure>", lambda _event: self._draw_plot())

    def _wire_events(self) -> None:
        for base, var in self.vars.items():
            if base in READ_ONLY_BASES:
                continue
            var.trace_add("write", self._make_change_handler(base))
            entry = self.fields[base].entry
            entry.bind("<FocusOut>", self._make_focus_out_handler(base))
            entry.bind("<Return>", self._make_focus_out_handler(base))
        self.bind_all("<Escape>", self._on_escape_quit, add=True)

    def _install_signal_handlers(self) -> None:
        def _on_sigint(_signum: int, _frame: object) -> None:
            self.after(0, self._quit_app)

        signal.signal(signal.SIGINT, _on_sigint)

    def _make_change_handler(self, base: str):
        def _handler(*_args) -> None:
            if not self._programmatic:
                self._update_from_source(base)

        return _handler

    def _make_focus_out_handler(self, base: str):
        def _handler(_event) -> None:
            self._set_var(base, encode(self.container.raw, self.active_width, base))
            self.fields[base].set_invalid(False)

        return _handler

    def _set_var(self, base: str, text: str) -> None:
        self._programmatic = True
        try:
            self.vars[base].set(text)
        finally:
            self._programmatic = False

    def _quit_app(self) -> None:
        self.quit()
        self.destroy()

    def _on_escape_quit(self, _event: tk.Event) -> str:
        self._quit_app()
        return "break"

    def _on_width_change(self) -> None:
        width = self.active_width
        self.container.raw = self.container.masked(width)
        logger.debug("Active width set to %d", width)
        self._refresh()

    def _on_bit_click(self, bit_index: int) -> None:
        if bit_index >= self.active_width:
            return
        self.container.apply("toggle_bit", self.active_width, bit_index)
        self._refresh()

    def _on_bit_op(self, op: str) -> None:
        self.container.apply(op, self.active_width)
        self._refresh()

    def _on_special_value(self, label: str) -> None:
        self.container.raw = special_value(label, self.active_width)
        self._refresh()

    def _update_from_source(self, source: str) -> None:
        value = decode(self.vars[source].get(), self.active_width, source)
        if value is None:
            self.fields[source].set_invalid(True)
            return
        self.fields[source].set_invalid(False)
        self.container.raw = value
        self._refresh(source=source)

    def _refresh(self, source: str | None = None) -> None:
        width = self.active_width
        raw = self.container.masked(width)
        state = format_state(raw, width)

        for base in BASES:
            if base != source:
                self._set_var(base, state.text(base))
                self.fields[base].set_invalid(False)

        for bit_index, cell in self.bit_cells.items():
            text, background, foreground = bit_cell_style(bit_index, width, raw)
            cell.configure(text=text, bg=background, fg=foreground)

        for key, value in describe_float(decode_float(raw, width)).items():
            self.readout_vars[key].set(value)

        for label, button in self.special_buttons.items():
            enabled = special_value(label, width) != 0
            button.configure(state="normal" if enabled else "disabled")

        self.status_var.set(status_text(raw, width))
        self._draw_plot()

    def _draw_plot(self) -> None:
        if self.plot is None:
            return
        canvas = self.plot
        canvas.delete("all")
        canvas_width = max(canvas.winfo_width(), 200)
        top, bottom = 8, PLOT_HEIGHT - 20

        for (label, start, stop), colour in zip(ZONES, ZONE_COLOURS):
            x0 = marker_x(start, canvas_width)
            x1 = marker_x(stop, canvas_width)
            canvas.create_rectangle(x0, top, x1, bottom, fill=colour, outline="")
            canvas.create_text(
                (x0 + x1) / 2, bottom + 10, text=label, font=ZONE_FONT, fill="#34495e"
            )

        width = self.active_width
        plot = map_position(decode_float(self.container.masked(width), width))
        x = marker_x(plot.position, canvas_width)
        canvas.create_line(x, top - 4, x, bottom + 4, fill="#1f2d3d", width=3)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="bitview",
        description="Inspect and edit a bit pattern as integers, text and IEEE 754 floats.",
    )
    parser.add_argument(
        "--width",
        type=int,
        choices=WIDTHS,
        default=DEFAULT_WIDTH,
        help="active bit width",
    )
    parser.add_argument(
        "--value",
        type=lambda text: int(text, 0),
        default=0,
        help="initial value; accepts 0x/0b/0o prefixes",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = BitViewerApp(width=args.width, value=args.value)
    app.mainloop()
