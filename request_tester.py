import logging
import queue
import threading
import time
import tkinter as tk
from tkinter import ttk, scrolledtext, messagebox, filedialog

import ttkbootstrap as tb

from dispatch import RequestsTransport, execute_request
from request_builder import METHODS
from request_store import dump_request, load_request, parse_request, save_request
from response_normalizer import prettify_json, status_class
from tester_errors import DialogCancelled, RequestTesterError
from tester_settings import load_settings, save_settings

log = logging.getLogger(__name__)

FILETYPES = [("JSON files", "*.json"), ("All files", "*.*")]


class TkDialogProvider:
    """Native save/open pickers; an empty answer from tkinter means cancelled."""

    def __init__(self, parent=None):
        self.parent = parent

    def pick_save_path(self):
        path = filedialog.asksaveasfilename(parent=self.parent, defaultextension=".json",
                                            filetypes=FILETYPES, initialfile="request.json")
        return path or None

    def pick_open_path(self):
        return filedialog.askopenfilename(parent=self.parent, filetypes=FILETYPES) or None


STATUS_STYLES = {
    "success": "Success.Status.TLabel",
    "redirect": "Redirect.Status.TLabel",
    "client_error": "ClientError.Status.TLabel",
    "server_error": "ServerError.Status.TLabel",
}


def status_style(code):
    return STATUS_STYLES.get(status_class(code), "Status.TLabel")


class RequestTester(tk.Tk):
    def __init__(self, settings=None):
        super().__init__()
        self.settings = settings if settings is not None else load_settings()
        self.title("Request Tester")
        self.geometry(self.settings.get("geometry") or "900x700")
        self.minsize(480, 420)
        style = ttk.Style()
        style.configure("Status.TLabel", font=("Segoe UI", 9), padding=2)
        style.configure("Success.Status.TLabel", foreground="#2e7d32")
        style.configure("Redirect.Status.TLabel", foreground="#1565c0")
        style.configure("ClientError.Status.TLabel", foreground="#ef6c00")
        style.configure("ServerError.Status.TLabel", foreground="#c62828")
        self.request_queue = queue.Queue()
        self.dialogs = TkDialogProvider(self)
        self._build_ui()
        self._apply_request(self.settings.get("last_request") or {})
        self.after(100, self._process_queue)
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    def _build_ui(self):
        top = ttk.Frame(self, padding=(6, 6, 6, 4)); top.pack(fill="x")
        top.columnconfigure(1, weight=1)
        self.method_var = tk.StringVar(value="GET")
        ttk.Combobox(top, textvariable=self.method_var, values=list(METHODS),
                     state="readonly", width=8).grid(row=0, column=0, padx=(0, 4))
        self.url_entry = ttk.Entry(top); self.url_entry.grid(row=0, column=1, sticky="ew")
        self.url_entry.bind("<Return>", lambda _e: self.send_request())
        self.execute_btn = ttk.Button(top, text="Execute", width=9, command=self.send_request)
        self.execute_btn.grid(row=0, column=2, padx=(4, 0))
        ttk.Button(top, text="Save", width=6, command=self._save_request).grid(row=0, column=3, padx=(4, 0))
        ttk.Button(top, text="Load", width=6, command=self._load_request).grid(row=0, column=4, padx=(4, 0))

        panes = ttk.Panedwindow(self, orient=tk.VERTICAL)
        panes.pack(fill="both", expand=True, padx=6, pady=(0, 6))
        req_nb = ttk.Notebook(panes)
        self.headers_text = scrolledtext.ScrolledText(req_nb, wrap=tk.WORD, height=6, font=("Consolas", 10))
        body_tab = ttk.Frame(req_nb)
        ttk.Button(body_tab, text="Prettify", width=9, command=self._prettify_body).pack(anchor="e", pady=(2, 2))
        self.body_text = scrolledtext.ScrolledText(body_tab, wrap=tk.WORD, height=6, font=("Consolas", 10))
        self.body_text.pack(fill="both", expand=True)
        req_nb.add(self.headers_text, text="Headers")
        req_nb.add(body_tab, text="Body")
        panes.add(req_nb, weight=1)

        res = ttk.Frame(panes, padding=(0, 4, 0, 0)); res.columnconfigure(0, weight=1); res.rowconfigure(1, weight=1)
        status_row = ttk.Frame(res); status_row.grid(row=0, column=0, sticky="ew", pady=(0, 4))
        self.status_label = ttk.Label(status_row, text="Status: Idle", style="Status.TLabel")
        self.status_label.pack(side="left")
        self.time_label = ttk.Label(status_row, text="", style="Status.TLabel")
        self.time_label.pack(side="left", padx=(8, 0))
        ttk.Button(status_row, text="Prettify", width=9, command=self._prettify_response).pack(side="right")
        res_nb = ttk.Notebook(res); res_nb.grid(row=1, column=0, sticky="nsew")
        self.response_body = scrolledtext.ScrolledText(res_nb, wrap=tk.WORD, font=("Consolas", 10), height=10)
        self.response_headers = scrolledtext.ScrolledText(res_nb, wrap=tk.WORD, font=("Consolas", 10), height=10)
        res_nb.add(self.response_body, text="Body"); res_nb.add(self.response_headers, text="Headers")
        panes.add(res, weight=3)

    def _current_request(self):
        return {
            "method": self.method_var.get(),
            "url": self.url_entry.get(),
            "headers": self.headers_text.get("1.0", "end-1c"),
            "body": self.body_text.get("1.0", "end-1c"),
        }

    def _apply_request(self, req):
        self.method_var.set(req.get("method") or "GET")
        self.url_entry.delete(0, "end"); self.url_entry.insert(0, req.get("url") or "")
        self.headers_text.delete("1.0", "end"); self.headers_text.insert("1.0", req.get("headers") or "")
        self.body_text.delete("1.0", "end"); self.body_text.insert("1.0", req.get("body") or "")

    def send_request(self):
        url = self.url_entry.get().strip()
        if not url:
            messagebox.showerror("Error", "Please enter a URL")
            return
        req = self._current_request()
        for w in (self.response_body, self.response_headers):
            w.delete("1.0", "end")
        self.status_label.config(text="Status: Sending...", style="Status.TLabel")
        self.time_label.config(text="")
        self.execute_btn.config(state="disabled", text="Executing...")
        threading.Thread(target=self._send_request_thread,
                         args=(req["method"], url, req["headers"], req["body"] or None),
                         daemon=True).start()

    def _send_request_thread(self, method, url, headers, body):
        transport = RequestsTransport(timeout=self.settings.get("timeout"))
        start = time.time()
        try:
            result = execute_request(method, url, headers, body, transport=transport)
            self.request_queue.put(("success", (result, time.time() - start)))
        except RequestTesterError as e:
            self.request_queue.put(("error", e))

    def _process_queue(self):
        try:
            msg, data = self.request_queue.get_nowait()
            self.execute_btn.config(state="normal", text="Execute")
            if msg == "success":
                self._render_response(*data)
            else:
                self.status_label.config(text="ERROR", style="ServerError.Status.TLabel")
                self.response_body.insert("1.0", f"Error: {data}")
        except queue.Empty:
            pass
        finally:
            self.after(100, self._process_queue)

    def _render_response(self, result, duration):
        self.status_label.config(text=f"{result.status} {result.status_text}", style=status_style(result.status))
        self.time_label.config(text=f"{int(duration * 1000)}ms")
        self.response_headers.insert("1.0", result.headers)
        self.response_body.insert("1.0", result.body_text())

    def _prettify_body(self):
        text = self.body_text.get("1.0", "end-1c")
        self.body_text.delete("1.0", "end"); self.body_text.insert("1.0", prettify_json(text))

    def _prettify_response(self):
        text = self.response_body.get("1.0", "end-1c")
        self.response_body.delete("1.0", "end"); self.response_body.insert("1.0", prettify_json(text))

    def _save_request(self):
        req = self._current_request()
        try:
            save_request(dump_request(req["method"], req["url"], req["headers"], req["body"]), self.dialogs)
        except DialogCancelled:
            pass
        except RequestTesterError as e:
            messagebox.showerror("Save Request", f"Save failed: {e}")

    def _load_request(self):
        try:
            self._apply_request(parse_request(load_request(self.dialogs)))
        except DialogCancelled:
            pass
        except RequestTesterError as e:
            messagebox.showerror("Load Request", f"Load failed: {e}")

    def _on_close(self):
        self.settings["geometry"] = self.geometry()
        self.settings["last_request"] = self._current_request()
        try:
            save_settings(self.settings)
        except OSError:
            log.exception("Failed to save settings")
        self.destroy()


def main():
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, str(settings.get("log_level", "INFO")).upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(message)s",
    )
    app = RequestTester(settings)
    try:
        tb.Style(settings.get("theme") or "cyborg")
    except Exception:
        log.warning("Unknown theme %r, keeping the default look", settings.get("theme"))
    app.mainloop()


if __name__ == "__main__":
    main()
