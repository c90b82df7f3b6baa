from __future__ import annotations

import threading
from copy import deepcopy
from pathlib import Path
import tkinter as tk
from tkinter import ttk, filedialog, messagebox, simpledialog

from quote_builder.config import APP_NAME, DEFAULT_OUTPUT_DIR, DRAFT_JSON
from quote_builder.draft_store import DebouncedSaver, DraftStore
from quote_builder.errors import WorkbookImportError
from quote_builder.extract.excel_reader import import_project
from quote_builder.logger import setup_file_logger
from quote_builder.pricing import compute_final_price, room_total
from quote_builder.quote import QuoteSession
from quote_builder.render.excel_template import save_project
from quote_builder.suppliers import SUPPLIERS, get_supplier_by_name


def _money(v) -> str:
    return f"${v:,.2f}"


class AppGUI:
    def __init__(self, root: tk.Tk):
        self.root = root
        self.root.title(APP_NAME)
        self.root.geometry("1000x700")

        self.logger = setup_file_logger(DEFAULT_OUTPUT_DIR)
        self.session = QuoteSession()
        self.store = DraftStore(DRAFT_JSON)
        self.saver = DebouncedSaver(self.store)

        self._build_ui()
        self._restore_draft()
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)

    def _build_ui(self):
        frm = ttk.Frame(self.root, padding=10)
        frm.pack(fill=tk.BOTH, expand=True)

        top = ttk.LabelFrame(frm, text="Project", padding=10)
        top.pack(fill=tk.X)

        ttk.Label(top, text="Name:").pack(side=tk.LEFT)
        self.project_var = tk.StringVar(value=self.session.project.project_name)
        self.project_var.trace_add("write", lambda *_: self.on_project_name())
        ttk.Entry(top, textvariable=self.project_var, width=50).pack(side=tk.LEFT, padx=5)

        self.btn_export = ttk.Button(top, text="Export Excel", command=self.on_export)
        self.btn_export.pack(side=tk.RIGHT)
        self.btn_import = ttk.Button(top, text="Import Excel", command=self.on_import)
        self.btn_import.pack(side=tk.RIGHT, padx=5)

        self._build_form(frm)

        items_box = ttk.LabelFrame(frm, text="Quote Items", padding=10)
        items_box.pack(fill=tk.BOTH, expand=True, pady=5)

        cols = ("sku", "product", "supplier", "qty", "base", "final")
        self.tree = ttk.Treeview(items_box, columns=cols, show="tree headings", height=12)
        for col, title in zip(cols, ["SKU", "Product", "Supplier", "Qty", "Base", "Final"]):
            self.tree.heading(col, text=title)
            self.tree.column(col, width=110)
        self.tree.pack(fill=tk.BOTH, expand=True)

        bottom = ttk.Frame(items_box)
        bottom.pack(fill=tk.X, pady=5)
        self.lbl_total = ttk.Label(bottom, text="Total: $0.00")
        self.lbl_total.pack(side=tk.LEFT)
        ttk.Button(bottom, text="Submit Quote", command=self.on_submit).pack(side=tk.RIGHT)
        ttk.Button(bottom, text="Remove selected", command=self.on_remove).pack(side=tk.RIGHT, padx=5)

        self.progress = ttk.Progressbar(frm, mode="indeterminate")
        self.progress.pack(fill=tk.X, pady=5)

        logbox = ttk.LabelFrame(frm, text="Log", padding=10)
        logbox.pack(fill=tk.BOTH)
        self.txt_log = tk.Text(logbox, height=6, wrap="word")
        self.txt_log.pack(fill=tk.BOTH, expand=True)

    def _build_form(self, parent: ttk.Frame):
        form = ttk.LabelFrame(parent, text="Add Furniture Item", padding=10)
        form.pack(fill=tk.X, pady=5)

        self.room_var = tk.StringVar()
        self.supplier_var = tk.StringVar()
        self.sku_var = tk.StringVar()
        self.qty_var = tk.StringVar(value="1")
        self.product_var = tk.StringVar()
        self.cost_var = tk.StringVar(value="0")
        self.notes_var = tk.StringVar()

        row1 = ttk.Frame(form)
        row1.pack(fill=tk.X)
        ttk.Label(row1, text="Room:").pack(side=tk.LEFT)
        self.cb_room = ttk.Combobox(row1, textvariable=self.room_var, state="readonly", width=20)
        self.cb_room.pack(side=tk.LEFT, padx=5)
        ttk.Button(row1, text="+", width=3, command=self.on_add_room).pack(side=tk.LEFT)

        ttk.Label(row1, text="Supplier:").pack(side=tk.LEFT, padx=(10, 0))
        cb_sup = ttk.Combobox(
            row1, textvariable=self.supplier_var, state="readonly", width=28, values=list(SUPPLIERS)
        )
        cb_sup.pack(side=tk.LEFT, padx=5)
        self.lbl_markup = ttk.Label(row1, text="")
        self.lbl_markup.pack(side=tk.LEFT)

        row2 = ttk.Frame(form)
        row2.pack(fill=tk.X, pady=5)
        for label, var, width in [
            ("SKU:", self.sku_var, 12),
            ("Qty:", self.qty_var, 6),
            ("Product:", self.product_var, 30),
            ("Base cost:", self.cost_var, 10),
            ("Notes:", self.notes_var, 24),
        ]:
            ttk.Label(row2, text=label).pack(side=tk.LEFT)
            ttk.Entry(row2, textvariable=var, width=width).pack(side=tk.LEFT, padx=3)

        row3 = ttk.Frame(form)
        row3.pack(fill=tk.X)
        self.lbl_estimate = ttk.Label(row3, text="Estimated final: $0.00")
        self.lbl_estimate.pack(side=tk.LEFT)
        ttk.Button(row3, text="Add Item", command=self.on_add_item).pack(side=tk.RIGHT)

        for var in (self.supplier_var, self.qty_var, self.cost_var):
            var.trace_add("write", lambda *_: self._update_estimate())

    def _log(self, msg: str):
        self.logger.info(msg)
        # Tk widgets are only touched from the main loop
        self.root.after(0, lambda m=msg: self._log_ui(m))

    def _log_ui(self, msg: str):
        self.txt_log.insert(tk.END, msg + "\n")
        self.txt_log.see(tk.END)

    def _changed(self):
        self._refresh()
        self.saver.schedule(self.session.project)

    def _refresh(self):
        project = self.session.project
        self.cb_room.config(values=project.rooms)
        if self.project_var.get() != project.project_name:
            self.project_var.set(project.project_name)

        self.tree.delete(*self.tree.get_children())
        for room_name, items in self.session.items_by_room().items():
            node = self.tree.insert(
                "", tk.END, text=f"{room_name} ({len(items)})", open=True,
                values=("", "", "", "", "", _money(room_total(items))),
            )
            for it in items:
                self.tree.insert(node, tk.END, iid=it.id, values=(
                    it.sku, it.product_name, it.supplier, it.quantity,
                    _money(it.base_cost), _money(it.final_price),
                ))
        self.lbl_total.config(
            text=f"Total: {_money(self.session.total_cost())} ({len(project.items)} items)"
        )

    def _update_estimate(self):
        sup = get_supplier_by_name(self.supplier_var.get())
        self.lbl_markup.config(text=f"{sup.country} • {sup.markup}x" if sup else "")
        try:
            estimate = compute_final_price(self.cost_var.get(), self.supplier_var.get(), int(self.qty_var.get()))
        except (ArithmeticError, ValueError):
            estimate = 0
        self.lbl_estimate.config(text=f"Estimated final: {_money(estimate)}")

    def _restore_draft(self):
        loaded = self.store.load()
        if loaded is not None:
            project, last_saved = loaded
            self.session.restore_draft(project)
            self._log(f"Draft restored (saved {last_saved})")
        self._refresh()

    def on_project_name(self):
        if self.project_var.get() != self.session.project.project_name:
            self.session.set_project_name(self.project_var.get())
            self.saver.schedule(self.session.project)

    def on_add_room(self):
        name = simpledialog.askstring("New room", "Enter room name:", parent=self.root)
        added = self.session.add_room(name or "")
        if added:
            self.room_var.set(added)
            self._changed()

    def on_add_item(self):
        try:
            item = self.session.add_item(
                room_name=self.room_var.get(),
                supplier=self.supplier_var.get(),
                product_name=self.product_var.get(),
                base_cost=self.cost_var.get(),
                quantity=self.qty_var.get(),
                sku=self.sku_var.get(),
                notes=self.notes_var.get(),
            )
        except ValueError as e:
            messagebox.showwarning("Invalid item", str(e))
            return

        self._log(f"Added {item.product_name} to {item.room_name}: {_money(item.final_price)}")
        for var, default in [
            (self.sku_var, ""), (self.product_var, ""), (self.cost_var, "0"),
            (self.notes_var, ""), (self.qty_var, "1"),
        ]:
            var.set(default)
        self._changed()

    def on_remove(self):
        for iid in self.tree.selection():
            if self.session.remove_item(iid):
                self._log(f"Removed item {iid}")
        self._changed()

    def on_submit(self):
        if not self.session.project.items:
            messagebox.showwarning("Empty quote", "Add at least one item before submitting.")
            return
        client = simpledialog.askstring("Submit Quote", "Client name:", parent=self.root)
        if not client:
            return
        email = simpledialog.askstring("Submit Quote", "Client email:", parent=self.root) or ""
        summary = self.session.quote_summary(client, email)
        self._log(f"Quote submitted for {client}: {_money(summary['totalCost'])}")
        messagebox.showinfo("Quote Submitted!", "Your furniture quote has been sent successfully.")

    # ---------------------------
    # background import/export
    # ---------------------------

    def _busy(self, busy: bool):
        state = tk.DISABLED if busy else tk.NORMAL
        self.btn_import.config(state=state)
        self.btn_export.config(state=state)
        if busy:
            self.progress.start(10)
        else:
            self.progress.stop()

    def on_import(self):
        path = filedialog.askopenfilename(
            title="Select a quote workbook",
            filetypes=[("Excel", "*.xlsx *.xls"), ("All files", "*.*")]
        )
        if not path:
            return
        self._busy(True)
        th = threading.Thread(target=self._import_worker, args=(path,), daemon=True)
        th.start()

    def _import_worker(self, path: str):
        try:
            p = Path(path)
            project = import_project(p.read_bytes(), p.name)
            self.root.after(0, lambda: self._import_done(project, p.name))
        except WorkbookImportError as e:
            self._log(f"Import failed: {e}")
            msg = str(e)
            self.root.after(0, lambda m=msg: messagebox.showerror("Import Failed", m))
        except Exception as e:
            self._log(f"Import failed: {e}")
            msg = f"Failed to import quote. Please check the file format.\n\n{e}"
            self.root.after(0, lambda m=msg: messagebox.showerror("Import Failed", m))
        finally:
            self.root.after(0, lambda: self._busy(False))

    def _import_done(self, project, file_name: str):
        self.session.apply_import(project)
        self._log(f"Loaded {len(project.items)} items from \"{file_name}\"")
        self._changed()

    def on_export(self):
        out_dir = filedialog.askdirectory(title="Select output folder", initialdir=str(DEFAULT_OUTPUT_DIR))
        if not out_dir:
            return
        self._busy(True)
        # snapshot: the worker never sees later edits
        snapshot = deepcopy(self.session.project)
        th = threading.Thread(target=self._export_worker, args=(snapshot, Path(out_dir)), daemon=True)
        th.start()

    def _export_worker(self, project, out_dir: Path):
        try:
            out_path = save_project(project, out_dir)
            self._log(f"Quote exported as \"{out_path.name}\"")
        except Exception as e:
            self._log(f"Export failed: {e}")
            err_msg = str(e)
            self.root.after(0, lambda m=err_msg: messagebox.showerror("Export Failed", m))
        finally:
            self.root.after(0, lambda: self._busy(False))

    def on_close(self):
        self.saver.schedule(self.session.project)
        self.saver.flush()
        self.root.destroy()


def main():
    root = tk.Tk()
    AppGUI(root)
    root.mainloop()


if __name__ == "__main__":
    main()
