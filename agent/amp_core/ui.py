"""
TkHost — the editor UI surface: status readout, prompts, option menu, toasts.

Created and used EXCLUSIVELY on the Tkinter main thread.
Hardened against widget-destroyed errors with TclError guards, so late
notifications during teardown never crash the loop.
"""

import tkinter as tk
from tkinter import filedialog, simpledialog

from .config import log
from .constants import (
    AGENT_VERSION, DEFAULT_URL_PLACEHOLDER, STATUS_CONNECTED, STATUS_DISCONNECTED,
    THEME, TOAST_DURATION_MS,
)


class TkHost:
    """
    Small always-on-top status window:

      [ status readout (click → options) ]   [ uptime / file ]
      [ toast line ]
      [ Connect ] [ Set URL ] [ Send ] [ Open folder ] [ Hello ]
    """

    def __init__(self, root):
        self._root = root
        self._toast_job = None
        self._commands = {}
        self._build_ui()

    # ─── UI construction ─────────────────────────────────────

    def _build_ui(self):
        root = self._root
        root.title(f"amp v{AGENT_VERSION}")
        root.configure(bg=THEME["bg_dark"])
        root.attributes("-topmost", True)
        root.resizable(False, False)

        bar = tk.Frame(root, bg=THEME["bg_card"], padx=12, pady=6)
        bar.pack(fill="x")

        self._status_label = tk.Label(
            bar, text=STATUS_DISCONNECTED, font=("Segoe UI", 11, "bold"),
            fg=THEME["text_muted"], bg=THEME["bg_card"], cursor="hand2",
        )
        self._status_label.pack(side="left")
        self._status_label.bind("<Button-1>", lambda e: self._run("options"))

        self._detail_label = tk.Label(
            bar, text="", font=("Segoe UI", 10),
            fg=THEME["text_muted"], bg=THEME["bg_card"],
        )
        self._detail_label.pack(side="right")

        self._toast_label = tk.Label(
            root, text="", font=("Segoe UI", 10), anchor="w",
            fg=THEME["text_primary"], bg=THEME["bg_dark"],
            wraplength=460, justify="left", padx=12, pady=4,
        )
        self._toast_label.pack(fill="x")

        buttons = tk.Frame(root, bg=THEME["bg_dark"], padx=8, pady=6)
        buttons.pack(fill="x")
        for name, text in (
            ("connect", "Connect"),
            ("set_url", "Set URL"),
            ("options", "Options"),
            ("send_now", "Send"),
            ("open_folder", "Open folder"),
            ("greet", "Hello"),
        ):
            tk.Button(
                buttons, text=text, font=("Segoe UI", 9),
                bg=THEME["primary"], fg="white",
                activebackground=THEME["primary_hover"], activeforeground="white",
                relief="flat", padx=8, pady=3, cursor="hand2",
                command=lambda n=name: self._run(n),
            ).pack(side="left", padx=2)

    def bind_commands(self, **commands):
        """Wire button names (connect, set_url, ...) to callables."""
        self._commands.update(commands)

    def _run(self, name):
        command = self._commands.get(name)
        if command is None:
            return
        try:
            command()
        except Exception as e:
            log.error("Command %s failed: %s", name, e, exc_info=True)
            self.show_error(f"{name} failed: {e}")

    # ─── Safe widget helpers ─────────────────────────────────

    def _safe_widget_config(self, widget, **kwargs):
        try:
            widget.config(**kwargs)
        except (tk.TclError, AttributeError):
            pass

    # ─── Status readout ──────────────────────────────────────

    def set_status(self, text):
        fg = THEME["success"] if text == STATUS_CONNECTED else THEME["text_muted"]
        self._safe_widget_config(self._status_label, text=text, fg=fg)

    def set_detail(self, text):
        self._safe_widget_config(self._detail_label, text=text)

    # ─── Notifications ───────────────────────────────────────

    def show_info(self, message):
        log.info("[notice] %s", message)
        self._toast(message, THEME["text_primary"])

    def show_error(self, message):
        log.warning("[error] %s", message)
        self._toast(message, THEME["error"])

    def _toast(self, message, color):
        self._safe_widget_config(self._toast_label, text=message, fg=color)
        try:
            if self._toast_job is not None:
                self._root.after_cancel(self._toast_job)
            self._toast_job = self._root.after(TOAST_DURATION_MS, self._clear_toast)
        except tk.TclError:
            self._toast_job = None

    def _clear_toast(self):
        self._toast_job = None
        self._safe_widget_config(self._toast_label, text="")

    # ─── Prompts ─────────────────────────────────────────────

    def prompt_url(self, placeholder=DEFAULT_URL_PLACEHOLDER):
        return simpledialog.askstring(
            "amp",
            f"Enter the WebSocket server URL\n(e.g. {placeholder})",
            parent=self._root,
        )

    def ask_folder(self):
        return filedialog.askdirectory(parent=self._root, mustexist=True) or None

    def pick_option(self, options):
        """Modal list of choices. Returns the chosen label or None."""
        result = {"choice": None}

        top = tk.Toplevel(self._root)
        top.title("amp options")
        top.configure(bg=THEME["bg_card"])
        top.attributes("-topmost", True)
        top.resizable(False, False)
        top.transient(self._root)

        def choose(option):
            result["choice"] = option
            top.destroy()

        body = tk.Frame(top, bg=THEME["bg_card"], padx=16, pady=12)
        body.pack(fill="both", expand=True)
        for option in options:
            tk.Button(
                body, text=option, font=("Segoe UI", 11), width=24,
                bg=THEME["bg_hover"], fg=THEME["text_primary"],
                activebackground=THEME["primary"], activeforeground="white",
                relief="flat", pady=6, cursor="hand2",
                command=lambda o=option: choose(o),
            ).pack(fill="x", pady=2)

        top.bind("<Escape>", lambda e: top.destroy())
        top.protocol("WM_DELETE_WINDOW", top.destroy)
        top.grab_set()
        self._root.wait_window(top)
        return result["choice"]
