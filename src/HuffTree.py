from __future__ import annotations
from dataclasses import dataclass
from heapq import heappush, heappop
from typing import Dict, List, Optional, Sequence, Tuple, Union

from Huff_Formats import ALPH_SIZE, PSEUDO_EOF

"""Дерево Хаффмана над 257 символами (256 байт + PSEUDO_EOF).

Узел: либо лист Leaf (ровно один символ, без детей), либо внутренний
узел Internal (ровно два ребёнка, без символа). Вес внутреннего узла равен
сумме весов его листьев. У дерева, прочитанного из заголовка, веса нет (None).

API:
    make_tree_from_counts(counts) → корень дерева
    make_codings_from_tree(root)  → {символ: код}
"""

# =================================================================================================================

@dataclass(eq=False)
class Leaf:
    symbol: int
    weight: Optional[int] = None

@dataclass(eq=False)
class Internal:
    left: "TreeNode"
    right: "TreeNode"
    weight: Optional[int] = None

TreeNode = Union[Leaf, Internal]

# =================================================================================================================

def make_tree_from_counts(counts: Sequence[int]) -> TreeNode:
    """Строит дерево Хаффмана по таблице частот.

    Каждому байту с ненулевой частотой соответствует лист; лист PSEUDO_EOF
    с весом 1 добавляется всегда, даже для пустого входа. Для пустого входа
    в дерево также попадает лист байта 0 с весом 0, поэтому в дереве
    минимум два листа и у каждого символа код длиной хотя бы 1 бит.

    Порядок извлечения узлов с равными весами не входит в контракт:
    сейчас он определяется порядком вставки в кучу.

    Args:
        counts (Sequence[int]): 256 неотрицательных частот, индекс = байт.

    Raises:
        ValueError: Неверная длина таблицы или отрицательная частота.

    Returns:
        TreeNode: Корень дерева (всегда Internal).
    """
    if len(counts) != ALPH_SIZE:
        raise ValueError(f"counts must have {ALPH_SIZE} entries, got {len(counts)}")

    # элемент кучи: (вес, уникальный_счётчик, узел)
    heap: List[Tuple[int, int, TreeNode]] = []
    uniq_id = 0

    for sym, w in enumerate(counts):
        if w < 0:
            raise ValueError(f"negative count {w} for symbol {sym}")
        if w > 0:
            heappush(heap, (w, uniq_id, Leaf(sym, w)))
            uniq_id += 1

    # Входной поток пуст: второй лист нулевого веса, чтобы код PSEUDO_EOF был непустым
    if not heap:
        heappush(heap, (0, uniq_id, Leaf(0, 0)))
        uniq_id += 1

    heappush(heap, (1, uniq_id, Leaf(PSEUDO_EOF, 1)))
    uniq_id += 1

    while len(heap) > 1:
        w1, _, n1 = heappop(heap)
        w2, _, n2 = heappop(heap)

        heappush(heap, (w1 + w2, uniq_id, Internal(n1, n2, w1 + w2)))
        uniq_id += 1

    _, _, root = heap[0]
    return root

def make_codings_from_tree(root: TreeNode) -> Dict[int, str]:
    """Назначает каждому листу код: путь от корня (влево '0', вправо '1').

    Args:
        root (TreeNode): Корень дерева.

    Returns:
        Dict[int, str]: {символ: код}, по одной записи на лист, включая PSEUDO_EOF.
    """
    codings: Dict[int, str] = {}

    def dfs(node: TreeNode, code: str):
        '''Обход дерева в глубину'''
        if isinstance(node, Leaf):      # базовый случай
            codings[node.symbol] = code
        else:
            dfs(node.left, code + "0")
            dfs(node.right, code + "1")

    dfs(root, "")
    return codings

# -------------------------------------------------------------------------------------------------

def tree_leaves(root: TreeNode) -> List[int]:
    """Символы листьев в порядке прямого обхода."""
    out = []
    stack = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            out.append(node.symbol)
        else:
            stack.append(node.right)
            stack.append(node.left)
    return out

def tree_depth(root: TreeNode) -> int:
    """Длина самого длинного кода (количество рёбер до самого глубокого листа)."""
    depth = 0
    stack = [(root, 0)]
    while stack:
        node, d = stack.pop()
        if isinstance(node, Leaf):
            depth = max(depth, d)
        else:
            stack.append((node.left, d + 1))
            stack.append((node.right, d + 1))
    return depth

def same_shape(a: TreeNode, b: TreeNode) -> bool:
    """Сравнивает форму деревьев и символы листьев, веса не учитываются."""
    stack = [(a, b)]
    while stack:
        x, y = stack.pop()
        if isinstance(x, Leaf) or isinstance(y, Leaf):
            if not (isinstance(x, Leaf) and isinstance(y, Leaf) and x.symbol == y.symbol):
                return False
            continue
        stack.append((x.left, y.left))
        stack.append((x.right, y.right))
    return True
