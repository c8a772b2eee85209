# -*- coding: utf-8 -*-
"""Главное окно: FamilyCanvasApp — холст, меню, диалоги, отрисовка сцены."""

__all__ = ["FamilyCanvasApp"]

import io
import logging
import tkinter as tk
from tkinter import ttk, messagebox, filedialog

from PIL import Image, ImageTk

from family_canvas import constants
from family_canvas.edges import EDGE_PARENT, EDGE_SPOUSE, STYLE_CUBIC, STYLE_ORTHOGONAL
from family_canvas.interaction import GestureState, InteractionDispatcher
from family_canvas.scene import FamilyDiagram
from family_canvas.ui_helpers import (
    create_form_fields,
    person_choices,
    choice_label,
    parse_choice,
    photo_source,
    NO_PERSON_LABEL,
)

logger = logging.getLogger(__name__)

EDGE_COLORS = {
    EDGE_PARENT: (constants.PARENT_LINE_COLOR, constants.PARENT_LINE_WIDTH),
    EDGE_SPOUSE: (constants.MARRIAGE_LINE_COLOR, constants.MARRIAGE_LINE_WIDTH),
}
SIBLING_STYLE = (constants.SIBLING_LINE_COLOR, constants.SIBLING_LINE_WIDTH)


class FamilyCanvasApp:
    def __init__(self, root, diagram=None):
        self.root = root
        self.root.title("Семейный холст")
        self.root.geometry(constants.DEFAULT_WINDOW_GEOMETRY)
        style = ttk.Style()
        style.configure('Accent.TButton', foreground='black', background='#e74c3c')
        # --- СОСТОЯНИЕ ---
        self.diagram = diagram or FamilyDiagram()
        self.dispatcher = InteractionDispatcher(self.diagram, on_select=self.on_person_click)
        self.photo_images = {}  # ссылки на PhotoImage, иначе их соберёт GC
        self.photo_scale = None
        self.last_selected_person_id = self.diagram.selected
        self.show_siblings_var = tk.BooleanVar(value=self.diagram.show_siblings)
        self.curved_links_var = tk.BooleanVar(value=self.diagram.edge_style == STYLE_CUBIC)
        # --- ХОЛСТ ---
        self.canvas = tk.Canvas(root, bg=constants.CANVAS_BG, highlightthickness=0)
        # --- МЕНЮ ---
        self.menu_bar = tk.Menu(root)
        self.file_menu = tk.Menu(self.menu_bar, tearoff=0)
        self.file_menu.add_command(label="Новый", command=self.new_file)
        self.file_menu.add_command(label="Демо-семья", command=self.load_demo)
        self.file_menu.add_separator()
        self.file_menu.add_command(label="Печать...", command=self.print_tree, accelerator="Ctrl+P")
        self.file_menu.add_separator()
        self.file_menu.add_command(label="Выход", command=self.on_exit)
        self.menu_bar.add_cascade(label="Файл", menu=self.file_menu)
        self.view_menu = tk.Menu(self.menu_bar, tearoff=0)
        self.view_menu.add_command(label="Приблизить", command=lambda: self.zoom_button(1), accelerator="+")
        self.view_menu.add_command(label="Отдалить", command=lambda: self.zoom_button(-1), accelerator="-")
        self.view_menu.add_command(label="Масштаб 1:1", command=self.reset_scale, accelerator="0")
        self.view_menu.add_command(label="Вписать в окно", command=self.fit_view, accelerator="F")
        self.view_menu.add_separator()
        self.view_menu.add_checkbutton(label="Связи братьев/сестёр", variable=self.show_siblings_var,
                                       command=self.toggle_siblings)
        self.view_menu.add_checkbutton(label="Плавные линии", variable=self.curved_links_var,
                                       command=self.toggle_curved_links)
        self.menu_bar.add_cascade(label="Вид", menu=self.view_menu)
        self.edit_menu = tk.Menu(self.menu_bar, tearoff=0)
        self.edit_menu.add_command(label="Добавить персону...", command=self.add_person_dialog)
        self.edit_menu.add_command(label="Редактировать...", command=self.edit_person_dialog)
        self.edit_menu.add_command(label="Удалить", command=self.delete_person)
        self.edit_menu.add_separator()
        self.edit_menu.add_command(label="Связать супругов...", command=self.add_spouse_dialog)
        self.edit_menu.add_command(label="Развязать супругов...", command=self.remove_spouse_dialog)
        self.edit_menu.add_command(label="Вернуть карточку на место", command=self.reset_card_position)
        self.menu_bar.add_cascade(label="Правка", menu=self.edit_menu)
        root.config(menu=self.menu_bar)
        # --- СТАТУСБАР ---
        self.statusbar = tk.Label(root, text=constants.MSG_STATUS_IDLE, bd=1, relief=tk.SUNKEN, anchor=tk.W,
                                  bg="#f1f5f9", fg="#334155", font=("Segoe UI", 9))
        self.statusbar.pack(side=tk.BOTTOM, fill=tk.X)
        self.canvas.pack(fill=tk.BOTH, expand=True)
        # --- КОНТЕКСТНОЕ МЕНЮ ---
        self.context_menu = tk.Menu(root, tearoff=0)
        self.context_menu.add_command(label="Редактировать", command=self.edit_person_dialog)
        self.context_menu.add_command(label="Удалить", command=self.delete_person)
        self.context_menu.add_separator()
        self.context_menu.add_command(label="Добавить ребёнка...",
                                      command=lambda: self.add_person_dialog(parent_id=self.last_selected_person_id,
                                                                             relation_type="child"))
        self.context_menu.add_command(label="Добавить супруга...",
                                      command=lambda: self.add_person_dialog(parent_id=self.last_selected_person_id,
                                                                             relation_type="spouse"))
        self.context_menu.add_command(label="Вернуть на место", command=self.reset_card_position)
        # --- СВЯЗИ КЛАВИШ ---
        self.canvas.bind("<ButtonPress-1>", self.on_press)
        self.canvas.bind("<B1-Motion>", self.on_motion)
        self.canvas.bind("<ButtonRelease-1>", self.on_release)
        self.canvas.bind("<Double-Button-1>", self.on_double_click)
        self.canvas.bind("<Button-3>", self.show_context_menu)
        self.canvas.bind("<MouseWheel>", self.on_wheel)
        self.canvas.bind("<Button-4>", self.on_wheel)
        self.canvas.bind("<Button-5>", self.on_wheel)
        self.canvas.bind("<Configure>", self.on_resize)
        self.canvas.bind("<Key>", self.on_key)
        self.root.bind("<Control-p>", lambda e: self.print_tree())
        # --- ЗАГРУЗКА ---
        self.diagram.subscribe(self.refresh_view)
        self.root.protocol("WM_DELETE_WINDOW", self.on_exit)
        self.refresh_view()

    # --- СОБЫТИЯ УКАЗАТЕЛЯ ---
    def _person_at(self, x, y):
        """id персоны под точкой экрана (по тегу card_<id>) или None."""
        for item_id in reversed(self.canvas.find_overlapping(x, y, x, y)):
            for tag in self.canvas.gettags(item_id):
                if tag.startswith("card_"):
                    return tag[len("card_"):]
        return None

    def on_press(self, event):
        self.canvas.focus_set()
        pid = self._person_at(event.x, event.y)
        self.dispatcher.pointer_down(event.x, event.y, node_id=pid)

    def on_motion(self, event):
        if self.dispatcher.pointer_move(event.x, event.y):
            if self.dispatcher.state is GestureState.DRAGGING:
                self.statusbar.config(text=constants.MSG_STATUS_DRAG_ACTIVE)
            else:
                self.statusbar.config(text=constants.MSG_STATUS_PAN_ACTIVE)

    def on_release(self, event):
        self.dispatcher.pointer_up()
        self.statusbar.config(text=constants.MSG_STATUS_IDLE)

    def on_double_click(self, event):
        pid = self._person_at(event.x, event.y)
        if pid is not None:
            self.on_person_click(pid)
            self.edit_person_dialog()
        else:
            self.dispatcher.double_click()
            self.statusbar.config(text=constants.MSG_STATUS_RESET)

    def on_wheel(self, event):
        # Windows/macOS: event.delta > 0 означает «от себя»; X11: Button-4 вверх, Button-5 вниз
        if event.num == 4:
            delta_y = -constants.ZOOM_BUTTON_DELTA
        elif event.num == 5:
            delta_y = constants.ZOOM_BUTTON_DELTA
        else:
            delta_y = -event.delta
        if delta_y == 0:
            return None
        self.dispatcher.wheel(event.x, event.y, delta_y)
        self.statusbar.config(text=constants.MSG_STATUS_ZOOM_IN if delta_y < 0 else constants.MSG_STATUS_ZOOM_OUT)
        return "break"

    def on_key(self, event):
        if self.dispatcher.key_press(event.keysym):
            return "break"
        return None

    def on_resize(self, event):
        self.diagram.viewport_size = (event.width, event.height)

    def on_person_click(self, pid):
        """Клик без перетаскивания: выбор карточки (или снятие выбора по фону)."""
        self.last_selected_person_id = pid
        self.diagram.select(pid)

    def show_context_menu(self, event):
        pid = self._person_at(event.x, event.y)
        if pid is None:
            return
        self.on_person_click(pid)
        try:
            self.context_menu.tk_popup(event.x_root, event.y_root)
        finally:
            self.context_menu.grab_release()

    # --- ОТРИСОВКА ---
    def refresh_view(self):
        self.canvas.delete("all")
        if not len(self.diagram.graph):
            self.canvas.create_text(max(self.canvas.winfo_width(), 2) / 2, max(self.canvas.winfo_height(), 2) / 2,
                                    text="Дерево пусто. Правка → «Добавить персону…» для начала работы.",
                                    font=("Segoe UI", 14, "bold"),
                                    fill="#64748b",
                                    justify="center")
            return
        self.sync_photo_cache(self.diagram.transform.k)
        scene = self.diagram.scene()
        for edge in scene.edges:
            self.draw_edge(edge)
        for pid, (x, y) in scene.positions.items():
            person = self.diagram.graph.get_person(pid)
            if person is not None:
                self.draw_person_card(pid, person, x, y)

    def draw_edge(self, edge):
        color, width = EDGE_COLORS.get(edge.kind, SIBLING_STYLE)
        k = self.diagram.transform.k
        flat = []
        for x, y in edge.points:
            flat.extend(self.diagram.viewport.to_screen(x, y))
        if len(flat) < 4:
            return
        options = {}
        if edge.style == STYLE_CUBIC:
            options["smooth"] = "raw"
        self.canvas.create_line(*flat, fill=color, width=max(1, width * k),
                                capstyle="round", joinstyle="round",
                                tags=f"{edge.kind}_line", **options)

    def draw_person_card(self, pid, person, x, y):
        """Карточка: рамка, фото (или заглушка), имя и id. (x, y) — левый верх в координатах холста."""
        k = self.diagram.transform.k
        config = self.diagram.config
        left, top = self.diagram.viewport.to_screen(x, y)
        width = config.card_width * k
        height = config.card_height * k
        center_x = left + width / 2

        if pid == self.diagram.selected:
            bg_color = constants.SELECTED_COLOR
        elif person.gender == constants.GENDER_MALE:
            bg_color = constants.MALE_COLOR
        elif person.gender == constants.GENDER_FEMALE:
            bg_color = constants.FEMALE_COLOR
        else:
            bg_color = constants.UNKNOWN_COLOR
        card_tags = f"card_{pid}"
        line_width = max(1, int(2 * k))
        self.canvas.create_rectangle(
            left, top, left + width, top + height,
            fill=bg_color,
            outline=constants.CARD_HOVER_BORDER if pid == self.diagram.selected else constants.CARD_BORDER_COLOR,
            width=line_width,
            tags=card_tags
        )

        photo_y = top + height * 0.32
        photo_img = self.load_photo_image(person, k)
        if photo_img:
            self.canvas.create_image(center_x, photo_y, image=photo_img, anchor='center', tags=card_tags)
        else:
            icon_size = 20 * k
            self.canvas.create_oval(
                center_x - icon_size, photo_y - icon_size,
                center_x + icon_size, photo_y + icon_size,
                fill=constants.CARD_PHOTO_PLACEHOLDER_FILL,
                outline=constants.CARD_PHOTO_PLACEHOLDER_OUTLINE,
                width=max(1, int(k)),
                tags=card_tags
            )

        self.canvas.create_text(
            center_x, top + height * 0.64,
            text=person.name or "Без имени",
            font=("Arial", max(1, int(10 * k)), "bold"),
            fill=constants.CARD_TEXT_PRIMARY,
            width=max(1, width - 8 * k),
            justify="center",
            anchor="n",
            tags=card_tags
        )
        sub = f"ID {pid}"
        if person.parents:
            sub += f" • род.: {', '.join(person.parents)}"
        self.canvas.create_text(
            center_x, top + height * 0.86,
            text=sub,
            font=("Arial", max(1, int(8 * k))),
            fill=constants.CARD_TEXT_SECONDARY,
            anchor="n",
            tags=card_tags
        )

    def sync_photo_cache(self, scale):
        """Миниатюры хранятся только для текущего масштаба."""
        if scale != self.photo_scale:
            self.photo_images.clear()
            self.photo_scale = scale

    def load_photo_image(self, person, scale=1.0):
        """PhotoImage для карточки (файл, base64 или data URL) или None. Кэшируется по масштабу."""
        source = photo_source(person.photo)
        if source is None:
            return None
        photo_key = (person.id, hash(person.photo), f"{scale:.2f}")
        if photo_key in self.photo_images:
            return self.photo_images[photo_key]
        kind, value = source
        try:
            image = Image.open(value) if kind == "path" else Image.open(io.BytesIO(value))
            if image.mode in ('RGBA', 'LA', 'P'):
                image = image.convert('RGBA')
                background = Image.new('RGB', image.size, (255, 255, 255))
                background.paste(image, mask=image.split()[-1])
                image = background
            elif image.mode != 'RGB':
                image = image.convert('RGB')
            max_w = max(1, int(constants.MAX_PHOTO_SIZE[0] * scale))
            max_h = max(1, int(constants.MAX_PHOTO_SIZE[1] * scale))
            image.thumbnail((max_w, max_h), Image.LANCZOS)
            photo_img = ImageTk.PhotoImage(image)
        except (OSError, ValueError) as e:
            logger.warning(f"Ошибка загрузки фото для {person.display_name()} (ID: {person.id}): {e}")
            return None
        self.photo_images[photo_key] = photo_img
        return photo_img

    # --- ВИД ---
    def zoom_button(self, direction):
        width, height = self.diagram.viewport_size
        self.diagram.viewport.zoom_step(direction, width / 2, height / 2, self.dispatcher.zoom_mode)
        self.diagram.notify()
        self.statusbar.config(text=constants.MSG_STATUS_ZOOM_IN if direction > 0 else constants.MSG_STATUS_ZOOM_OUT)

    def reset_scale(self):
        self.diagram.reset_view()
        self.statusbar.config(text=constants.MSG_STATUS_RESET)

    def fit_view(self):
        self.diagram.fit()
        self.statusbar.config(text=constants.MSG_STATUS_FIT)

    def toggle_siblings(self):
        self.diagram.show_siblings = self.show_siblings_var.get()
        self.diagram.notify()

    def toggle_curved_links(self):
        self.diagram.edge_style = STYLE_CUBIC if self.curved_links_var.get() else STYLE_ORTHOGONAL
        self.diagram.notify()

    def print_tree(self):
        """Печать в PostScript: дерево временно вписывается в окно, затем вид возвращается."""
        if not len(self.diagram.graph):
            messagebox.showinfo("Печать", "Дерево пусто.")
            return
        path = filedialog.asksaveasfilename(defaultextension=".ps",
                                            filetypes=[("PostScript", "*.ps"), ("Все файлы", "*.*")])
        if not path:
            return
        try:
            self.diagram.print_fitted(lambda: self.canvas.postscript(file=path, colormode="color"))
        except tk.TclError as e:
            messagebox.showerror("Ошибка", f"Не удалось напечатать: {e}")
            return
        self.statusbar.config(text=constants.MSG_STATUS_PRINTED)

    def reset_card_position(self):
        pid = self.last_selected_person_id
        if pid in self.diagram.graph:
            self.diagram.reset_offset(pid)

    # --- ДИАЛОГИ ---
    def _person_dialog(self, title, fields_config, on_submit, submit_text):
        dialog = tk.Toplevel(self.root)
        dialog.title(title)
        dialog.transient(self.root)
        dialog.grab_set()
        frame = ttk.Frame(dialog)
        frame.pack(fill=tk.BOTH, expand=True)
        widgets, _ = create_form_fields(frame, fields_config)

        btn_frame = ttk.Frame(dialog)
        btn_frame.pack(side=tk.BOTTOM, fill=tk.X, padx=10, pady=10)

        def submit():
            error = on_submit(widgets)
            if error:
                messagebox.showerror("Ошибка", error, parent=dialog)
                return
            dialog.destroy()

        ttk.Button(btn_frame, text=submit_text, command=submit, style="Accent.TButton").pack(side=tk.LEFT, padx=5)
        ttk.Button(btn_frame, text="Отмена", command=dialog.destroy).pack(side=tk.LEFT, padx=5)
        return dialog

    def _gender_field(self, default=constants.GENDER_UNKNOWN):
        return ("Пол", "Radiobutton", default,
                {"values": list(constants.GENDERS), "labels": constants.GENDER_LABELS})

    def add_person_dialog(self, parent_id=None, relation_type=None):
        """
        Диалог добавления персоны.
        relation_type="child" подставляет parent_id первым родителем, "spouse" — супругом.
        """
        graph = self.diagram.graph
        choices = person_choices(graph)
        parent_a = spouse = NO_PERSON_LABEL
        if parent_id in graph and relation_type == "child":
            parent_a = choice_label(graph.get_person(parent_id))
        elif parent_id in graph and relation_type == "spouse":
            spouse = choice_label(graph.get_person(parent_id))
        fields_config = [
            ("Имя*", "Entry", "", {}),
            ("Фото (путь или data URL)", "Entry", "", {}),
            self._gender_field(),
            ("Родитель 1", "Combobox", parent_a, {"values": choices}),
            ("Родитель 2", "Combobox", NO_PERSON_LABEL, {"values": choices}),
            ("Супруг(а)", "Combobox", spouse, {"values": choices}),
        ]

        def on_submit(widgets):
            new_id, error = self.diagram.add_person(
                name=widgets["Имя*"].get(),
                photo=widgets["Фото (путь или data URL)"].get(),
                gender=widgets["Пол"].get(),
                parent_a=parse_choice(widgets["Родитель 1"].get()),
                parent_b=parse_choice(widgets["Родитель 2"].get()),
                spouse=parse_choice(widgets["Супруг(а)"].get()),
            )
            if error:
                return error
            self.on_person_click(new_id)
            self.statusbar.config(text=constants.MSG_SUCCESS_PERSON_ADDED)
            return None

        self._person_dialog("Добавить персону", fields_config, on_submit, "Добавить")

    def edit_person_dialog(self):
        pid = self.last_selected_person_id
        person = self.diagram.graph.get_person(pid) if pid else None
        if person is None:
            messagebox.showerror("Ошибка", constants.MSG_ERROR_NOTHING_SELECTED)
            return
        graph = self.diagram.graph
        choices = person_choices(graph, exclude=pid)
        parents = [choice_label(graph.get_person(p)) if p in graph else NO_PERSON_LABEL for p in person.parents]
        parents += [NO_PERSON_LABEL] * (2 - len(parents))
        fields_config = [
            ("Имя*", "Entry", person.name, {}),
            ("Фото (путь или data URL)", "Entry", person.photo, {}),
            self._gender_field(person.gender),
            ("Родитель 1", "Combobox", parents[0], {"values": choices}),
            ("Родитель 2", "Combobox", parents[1], {"values": choices}),
        ]

        def on_submit(widgets):
            new_parents = [parse_choice(widgets["Родитель 1"].get()), parse_choice(widgets["Родитель 2"].get())]
            ok, message = self.diagram.edit_person(
                pid,
                name=widgets["Имя*"].get(),
                photo=widgets["Фото (путь или data URL)"].get(),
                gender=widgets["Пол"].get(),
                parents=[p for p in new_parents if p],
            )
            if not ok:
                return message
            self.statusbar.config(text=message)
            return None

        self._person_dialog(f"Редактировать: {person.display_name()}", fields_config, on_submit, "Сохранить")

    def delete_person(self):
        pid = self.last_selected_person_id
        person = self.diagram.graph.get_person(pid) if pid else None
        if person is None:
            messagebox.showerror("Ошибка", constants.MSG_ERROR_NOTHING_SELECTED)
            return
        if not messagebox.askyesno("Подтверждение удаления",
                                   f"Удалить '{person.display_name()}' и все связи с ней (родители, браки)?"):
            return
        success, message = self.diagram.delete_person(pid)
        if success:
            self.last_selected_person_id = None
            self.statusbar.config(text=message)
        else:
            messagebox.showerror("Ошибка", message)

    def _spouse_dialog(self, title, submit_text, action):
        pid = self.last_selected_person_id
        graph = self.diagram.graph
        first = choice_label(graph.get_person(pid)) if pid in graph else NO_PERSON_LABEL
        choices = person_choices(graph)
        fields_config = [
            ("Персона", "Combobox", first, {"values": choices}),
            ("Супруг(а)", "Combobox", NO_PERSON_LABEL, {"values": choices}),
        ]

        def on_submit(widgets):
            a = parse_choice(widgets["Персона"].get())
            b = parse_choice(widgets["Супруг(а)"].get())
            if a is None or b is None:
                return constants.MSG_ERROR_PERSON_NOT_FOUND
            ok, message = action(a, b)
            if not ok:
                return message
            self.statusbar.config(text=message)
            return None

        self._person_dialog(title, fields_config, on_submit, submit_text)

    def add_spouse_dialog(self):
        self._spouse_dialog("Связать супругов", "Связать", self.diagram.add_spouse_link)

    def remove_spouse_dialog(self):
        self._spouse_dialog("Развязать супругов", "Развязать", self.diagram.remove_spouse_link)

    # --- ФАЙЛ ---
    def new_file(self):
        if len(self.diagram.graph) and not messagebox.askyesno("Новое дерево", "Очистить текущее дерево?"):
            return
        self.photo_images.clear()
        self.last_selected_person_id = None
        self.diagram.new_tree()

    def load_demo(self):
        if len(self.diagram.graph) and not messagebox.askyesno("Демо-семья", "Заменить текущее дерево демо-семьёй?"):
            return
        self.diagram.new_tree()
        self.last_selected_person_id = self.diagram.seed_demo()

    def on_exit(self):
        self.root.destroy()
        return True
