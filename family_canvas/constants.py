# -*- coding: utf-8 -*-
"""Константы, палитра и параметры компоновки для «Семейного холста»."""

from dataclasses import dataclass

# --- Пол ---
GENDER_MALE = "M"
GENDER_FEMALE = "F"
GENDER_UNKNOWN = ""
GENDERS = (GENDER_MALE, GENDER_FEMALE, GENDER_UNKNOWN)
GENDER_LABELS = {
    GENDER_MALE: "Мужской",
    GENDER_FEMALE: "Женский",
    GENDER_UNKNOWN: "Не указан",
}

# --- Дизайн: холст и карточки ---
CANVAS_BG = "#f5f0e8"
MARRIAGE_LINE_COLOR = "#b45309"
PARENT_LINE_COLOR = "#475569"
SIBLING_LINE_COLOR = "#0d9488"

MALE_COLOR = "#1e40af"
FEMALE_COLOR = "#9d174d"
UNKNOWN_COLOR = "#64748b"
SELECTED_COLOR = "#b45309"

CARD_BORDER_COLOR = "#1e293b"
CARD_HOVER_BORDER = "#eab308"
CARD_TEXT_PRIMARY = "#ffffff"
CARD_TEXT_SECONDARY = "#e2e8f0"
CARD_PHOTO_PLACEHOLDER_FILL = "#e2e8f0"
CARD_PHOTO_PLACEHOLDER_OUTLINE = "#94a3b8"

PARENT_LINE_WIDTH = 2
MARRIAGE_LINE_WIDTH = 3
SIBLING_LINE_WIDTH = 1
MAX_PHOTO_SIZE = (80, 56)

# --- Масштаб и панорамирование ---
ZOOM_LIMITS = (0.4, 2.2)
ZOOM_LIMITS_COARSE = (0.2, 3.0)
ZOOM_STEP = 1.1
ZOOM_LINEAR_STEP = 0.1
ZOOM_EXP_RATE = 0.0015
ZOOM_BUTTON_DELTA = 120
DEFAULT_TRANSFORM = (300.0, 120.0, 1.0)

DRAG_THRESHOLD = 5  # пикселей экрана: меньше считается кликом, а не перетаскивание
KEY_PAN_STEP = 40


@dataclass(frozen=True)
class LayoutConfig:
    """Размеры сетки и карточек в логических единицах холста."""

    # Ширина слота одиночки; слот пары = slot_width + card_width + couple_gap.
    slot_width: float = 200
    # Расстояние между поколениями (постоянное, не зависит от содержимого).
    level_gap: float = 200
    # Зазор между карточками супругов.
    couple_gap: float = 20
    card_width: float = 160
    card_height: float = 110
    # Поля вокруг дерева при «Вписать».
    fit_margin: float = 40
    # Насколько выше карточек проходит линия братьев/сестёр.
    sibling_rise: float = 14


DEFAULT_LAYOUT = LayoutConfig()

# --- Сообщения ---
MSG_SUCCESS_PERSON_ADDED = "Персона успешно добавлена!"
MSG_SUCCESS_PERSON_EDITED = "Персона успешно отредактирована!"
MSG_SUCCESS_PERSON_DELETED = "Персона успешно удалена!"
MSG_SUCCESS_MARRIAGE_ADDED = "Брак успешно добавлен!"
MSG_SUCCESS_MARRIAGE_REMOVED = "Брак успешно удален!"
MSG_SUCCESS_SNAPSHOT_LOADED = "Дерево загружено."
MSG_ERROR_CANNOT_ADD_TO_SELF = "Невозможно добавить связь с самим собой."
MSG_ERROR_DUPLICATE_MARRIAGE = "Брак между этими людьми уже существует."
MSG_ERROR_MARRIAGE_NOT_FOUND = "Такого брака нет."
MSG_ERROR_PERSON_NOT_FOUND = "Персона не найдена."
MSG_ERROR_CYCLE = "Обнаружен цикл в родственных связях"
MSG_ERROR_NOTHING_SELECTED = "Персона не выбрана или не существует."

MSG_STATUS_IDLE = "Ожидание..."
MSG_STATUS_ZOOM_IN = "Приближение"
MSG_STATUS_ZOOM_OUT = "Отдаление"
MSG_STATUS_PAN_ACTIVE = "Перемещение активно"
MSG_STATUS_DRAG_ACTIVE = "Перетаскивание карточки"
MSG_STATUS_FIT = "Дерево вписано в окно"
MSG_STATUS_RESET = "Масштаб 1:1"
MSG_STATUS_PRINTED = "Печать сохранена"

# --- Валидация ---
VALIDATION_MSG_NAME_REQUIRED = "Имя обязательно для заполнения"
VALIDATION_MSG_GENDER_INVALID = "Пол должен быть 'M', 'F' или пустым"
VALIDATION_MSG_DUPLICATE_PARENTS = "Один и тот же родитель указан дважды"
VALIDATION_MSG_TOO_MANY_PARENTS = "У персоны не может быть больше двух родителей"
VALIDATION_MSG_PARENT_UNKNOWN = "Родитель не найден: {pid}"
VALIDATION_MSG_PARENT_SELF = "Персона не может быть своим родителем"

# --- Импорт снимка ---
SNAPSHOT_MSG_NOT_DICT = "Формат не валиден: ожидается объект"
SNAPSHOT_MSG_MISSING = "Формат не валиден: нет поля '{field}'"
SNAPSHOT_MSG_BAD_PEOPLE = "Формат не валиден: 'people' должно быть объектом"
SNAPSHOT_MSG_BAD_ORDER = "Формат не валиден: 'order' должно быть списком"
SNAPSHOT_MSG_ORDER_UNKNOWN = "Формат не валиден: id {pid} из 'order' отсутствует в 'people'"
SNAPSHOT_MSG_BAD_PERSON = "Формат не валиден: запись персоны {pid} повреждена ({reason})"

# --- Настройки окна ---
DEFAULT_WINDOW_GEOMETRY = "1200x800+100+100"
