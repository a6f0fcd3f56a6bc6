"""结构模态分析基准：预应力框架频率扫描与圆环网格收敛外推。"""

__all__ = [
    "solver",
    "validation",
    "io",
    "reporting",
]
