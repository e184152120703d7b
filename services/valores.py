"""
Leitura e validação de valores digitados pelo operador.
"""
import math

from services.errors import ValidationError


def ler_valor(valor, campo: str = "Valor") -> float:
    """
    Converte um valor monetário (número ou texto com vírgula decimal) em float com 2 casas.
    Rejeita valores vazios, não numéricos, infinitos ou negativos.
    """
    if valor is None or isinstance(valor, bool):
        raise ValidationError(f"{campo} inválido.")
    if isinstance(valor, str):
        texto = valor.strip().replace("R$", "").strip()
        if "," in texto:
            texto = texto.replace(".", "").replace(",", ".")
        if not texto:
            raise ValidationError(f"{campo} inválido.")
        try:
            numero = float(texto)
        except ValueError as exc:
            raise ValidationError(f"{campo} inválido.") from exc
    elif isinstance(valor, (int, float)):
        numero = float(valor)
    else:
        raise ValidationError(f"{campo} inválido.")

    if not math.isfinite(numero):
        raise ValidationError(f"{campo} inválido.")
    if numero < 0:
        raise ValidationError(f"{campo} não pode ser negativo.")
    return round(numero, 2)


def ler_quantidade(valor, campo: str = "Quantidade", minimo: int = 1) -> int:
    if isinstance(valor, bool):
        raise ValidationError(f"{campo} inválida.")
    try:
        numero = int(valor)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError(f"{campo} inválida.") from exc
    if numero != valor and not isinstance(valor, str):
        # 1.5 unidades não existe
        raise ValidationError(f"{campo} deve ser um número inteiro.")
    if numero < minimo:
        raise ValidationError(f"{campo} deve ser no mínimo {minimo}.")
    return numero
