from pathlib import Path

import sys
sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from errores import ErrorConfiguracion
from unidades import dimensiones_pagina, mm_to_pt, pt_to_mm


@pytest.mark.parametrize("mm", [0.0, 1.0, 10.0, 25.4, 215.9, 1234.5])
def test_mm_pt_ida_y_vuelta(mm):
    assert abs(pt_to_mm(mm_to_pt(mm)) - mm) < 1e-6


def test_pulgada_son_72_puntos():
    assert mm_to_pt(25.4) == pytest.approx(72.0, abs=1e-3)


def test_dimensiones_papel():
    assert dimensiones_pagina("letter") == (612.0, 792.0)
    assert dimensiones_pagina("legal") == (612.0, 1008.0)
    assert dimensiones_pagina("Legal", vertical=False) == (1008.0, 612.0)


def test_papel_desconocido():
    with pytest.raises(ErrorConfiguracion):
        dimensiones_pagina("a4")
