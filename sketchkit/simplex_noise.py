# sketchkit/simplex_noise.py
"""
3D симплекс-шум с таблицей перестановок, построенной из сида
На основе алгоритма Стифана Густавсона (Stefan Gustavson)
"""

import numpy as np
from typing import Optional, Union
from numba import jit

from .seeded_random import DrawFunction, SeededRandom

# ----------------------------------------------------------------------
# Константы для симплекс-шума
# ----------------------------------------------------------------------

# 12 направлений градиента: середины ребер куба
GRAD3 = np.array([
    [1, 1, 0], [-1, 1, 0], [1, -1, 0], [-1, -1, 0],
    [1, 0, 1], [-1, 0, 1], [1, 0, -1], [-1, 0, -1],
    [0, 1, 1], [0, -1, 1], [0, 1, -1], [0, -1, -1]
], dtype=np.float64)

TABLE_SIZE = 512

# Коэффициенты скоса для 3D
_F3 = 1.0 / 3.0
_G3 = 1.0 / 6.0

# ----------------------------------------------------------------------
# Таблицы
# ----------------------------------------------------------------------

def build_permutation_table(random: DrawFunction) -> np.ndarray:
    """
    Построение таблицы перестановок (512 байт)

    Первые 255 позиций перемешиваются Фишером-Йетсом, позиция 255
    участвует только как цель обмена. Вторая половина таблицы - копия
    первой, чтобы индексы не нужно было заворачивать.

    Args:
        random: Функция без аргументов, возвращающая float в [0, 1)

    Returns:
        Массив uint8 длиной 512
    """
    half = TABLE_SIZE // 2
    p = np.zeros(TABLE_SIZE, dtype=np.uint8)
    p[:half] = np.arange(half, dtype=np.uint8)
    for i in range(half - 1):
        r = i + int(random() * (half - i))
        p[i], p[r] = p[r], p[i]
    p[half:] = p[:half]
    return p


def build_gradient_tables(perm: np.ndarray):
    """Градиенты для каждой ячейки таблицы: GRAD3[perm[n] % 12] по осям"""
    grads = GRAD3[perm.astype(np.intp) % 12]
    gx = np.ascontiguousarray(grads[:, 0])
    gy = np.ascontiguousarray(grads[:, 1])
    gz = np.ascontiguousarray(grads[:, 2])
    return gx, gy, gz

# ----------------------------------------------------------------------
# Вспомогательные функции
# ----------------------------------------------------------------------

@jit(nopython=True, cache=True)
def _fast_floor(x: float) -> int:
    """Быстрое вычисление floor для положительных и отрицательных чисел"""
    xi = int(x)
    return xi if x >= xi else xi - 1

# ----------------------------------------------------------------------
# 3D симплекс-шум
# ----------------------------------------------------------------------

@jit(nopython=True, cache=True)
def simplex_noise_3d(x: float, y: float, z: float, perm: np.ndarray,
                     gx: np.ndarray, gy: np.ndarray, gz: np.ndarray) -> float:
    """
    3D симплекс-шум

    Args:
        x, y, z: Координаты
        perm: Таблица перестановок (длиной 512)
        gx, gy, gz: Компоненты градиентов для каждой ячейки perm

    Returns:
        Значение шума в диапазоне примерно [-1, 1]
    """
    # Шаг 1: Скашиваем пространство, находим ячейку симплекса
    s = (x + y + z) * _F3
    i = _fast_floor(x + s)
    j = _fast_floor(y + s)
    k = _fast_floor(z + s)

    t = (i + j + k) * _G3
    X0 = i - t
    Y0 = j - t
    Z0 = k - t
    x0 = x - X0
    y0 = y - Y0
    z0 = z - Z0

    # Шаг 2: Определяем, в каком тетраэдре находимся
    if x0 >= y0:
        if y0 >= z0:        # XYZ order
            i1, j1, k1 = 1, 0, 0
            i2, j2, k2 = 1, 1, 0
        elif x0 >= z0:      # XZY order
            i1, j1, k1 = 1, 0, 0
            i2, j2, k2 = 1, 0, 1
        else:               # ZXY order
            i1, j1, k1 = 0, 0, 1
            i2, j2, k2 = 1, 0, 1
    else:
        if y0 < z0:         # ZYX order
            i1, j1, k1 = 0, 0, 1
            i2, j2, k2 = 0, 1, 1
        elif x0 < z0:       # YZX order
            i1, j1, k1 = 0, 1, 0
            i2, j2, k2 = 0, 1, 1
        else:               # YXZ order
            i1, j1, k1 = 0, 1, 0
            i2, j2, k2 = 1, 1, 0

    # Координаты внутри симплекса
    x1 = x0 - i1 + _G3
    y1 = y0 - j1 + _G3
    z1 = z0 - k1 + _G3
    x2 = x0 - i2 + 2.0 * _G3
    y2 = y0 - j2 + 2.0 * _G3
    z2 = z0 - k2 + 2.0 * _G3
    x3 = x0 - 1.0 + 3.0 * _G3
    y3 = y0 - 1.0 + 3.0 * _G3
    z3 = z0 - 1.0 + 3.0 * _G3

    # Шаг 3: Хешируем углы тетраэдра
    ii = i & 255
    jj = j & 255
    kk = k & 255

    # Шаг 4: Вычисляем вклад от каждого угла
    n0 = 0.0
    t0 = 0.6 - x0 * x0 - y0 * y0 - z0 * z0
    if t0 >= 0:
        gi0 = ii + perm[jj + perm[kk]]
        t0 *= t0
        n0 = t0 * t0 * (gx[gi0] * x0 + gy[gi0] * y0 + gz[gi0] * z0)

    n1 = 0.0
    t1 = 0.6 - x1 * x1 - y1 * y1 - z1 * z1
    if t1 >= 0:
        gi1 = ii + i1 + perm[jj + j1 + perm[kk + k1]]
        t1 *= t1
        n1 = t1 * t1 * (gx[gi1] * x1 + gy[gi1] * y1 + gz[gi1] * z1)

    n2 = 0.0
    t2 = 0.6 - x2 * x2 - y2 * y2 - z2 * z2
    if t2 >= 0:
        gi2 = ii + i2 + perm[jj + j2 + perm[kk + k2]]
        t2 *= t2
        n2 = t2 * t2 * (gx[gi2] * x2 + gy[gi2] * y2 + gz[gi2] * z2)

    n3 = 0.0
    t3 = 0.6 - x3 * x3 - y3 * y3 - z3 * z3
    if t3 >= 0:
        gi3 = ii + 1 + perm[jj + 1 + perm[kk + 1]]
        t3 *= t3
        n3 = t3 * t3 * (gx[gi3] * x3 + gy[gi3] * y3 + gz[gi3] * z3)

    # Шаг 5: Возвращаем результат
    return 32.0 * (n0 + n1 + n2 + n3)

# ----------------------------------------------------------------------
# Векторизованная версия для работы с массивами
# ----------------------------------------------------------------------

@jit(nopython=True, cache=True)
def simplex_noise_3d_array(x: np.ndarray, y: np.ndarray, z: np.ndarray,
                           perm: np.ndarray, gx: np.ndarray,
                           gy: np.ndarray, gz: np.ndarray) -> np.ndarray:
    """Векторизованная версия 3D симплекс-шума (массивы одной формы, последовательно)"""
    xf = x.ravel()
    yf = y.ravel()
    zf = z.ravel()
    result = np.empty(xf.shape[0], dtype=np.float64)

    for n in range(xf.shape[0]):
        result[n] = simplex_noise_3d(xf[n], yf[n], zf[n], perm, gx, gy, gz)

    return result.reshape(x.shape)

# ----------------------------------------------------------------------
# Класс для удобной работы с симплекс-шумом
# ----------------------------------------------------------------------

class SimplexNoise3D:
    """Удобный интерфейс для 3D симплекс-шума"""

    def __init__(self, random: Optional[DrawFunction] = None):
        """
        Инициализация генератора шума

        Args:
            random: Функция случайных чисел в [0, 1) для перемешивания
                таблицы. По умолчанию - недетерминированный генератор.
        """
        if random is None:
            random = SeededRandom()
        self.perm = build_permutation_table(random)
        self.grad_x, self.grad_y, self.grad_z = build_gradient_tables(self.perm)
        for table in (self.perm, self.grad_x, self.grad_y, self.grad_z):
            table.flags.writeable = False

    @classmethod
    def from_seed(cls, seed: str) -> "SimplexNoise3D":
        """Шум с таблицей, построенной из строкового сида"""
        return cls(SeededRandom(seed))

    def noise(self, x: Union[float, np.ndarray],
              y: Union[float, np.ndarray],
              z: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """3D симплекс-шум для точки или для массивов одной формы"""
        if isinstance(x, np.ndarray) or isinstance(y, np.ndarray) or isinstance(z, np.ndarray):
            xa, ya, za = np.broadcast_arrays(
                np.asarray(x, dtype=np.float64),
                np.asarray(y, dtype=np.float64),
                np.asarray(z, dtype=np.float64),
            )
            return simplex_noise_3d_array(
                np.ascontiguousarray(xa), np.ascontiguousarray(ya), np.ascontiguousarray(za),
                self.perm, self.grad_x, self.grad_y, self.grad_z,
            )
        return simplex_noise_3d(
            float(x), float(y), float(z),
            self.perm, self.grad_x, self.grad_y, self.grad_z,
        )

    def __call__(self, x, y, z):
        return self.noise(x, y, z)
