"""
Carrinhos de venda: venda rápida (itens em memória) e comanda (itens gravados a cada ação).

As duas variantes expõem as mesmas operações: adicionar, incrementar,
decrementar, remover, total e finalizar.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from models.sale import METODOS_PAGAMENTO, STATUS_ABERTA, STATUS_FINALIZADA, Sale, SaleItem
from services.caixa_service import exigir_caixa_aberto
from services.errors import ConflictError, NotFoundError, ValidationError, transacao
from services.produto_service import baixar_estoque, devolver_estoque, obter_produto
from services.valores import ler_quantidade, ler_valor

logger = logging.getLogger(__name__)


@dataclass
class LinhaCarrinho:
    produto_id: int
    nome: str
    quantidade: int
    preco_unitario: float

    @property
    def subtotal(self) -> float:
        return round(self.quantidade * self.preco_unitario, 2)


@dataclass
class VendaFinalizada:
    venda_id: int
    total: float
    metodo_pagamento: str
    troco: float = 0.0


def validar_metodo(metodo_pagamento: Optional[str]) -> str:
    if not metodo_pagamento:
        raise ValidationError("Selecione a forma de pagamento.")
    if metodo_pagamento not in METODOS_PAGAMENTO:
        raise ValidationError("Forma de pagamento inválida.")
    return metodo_pagamento


def calcular_troco(total: float, metodo_pagamento: Optional[str], valor_recebido=None) -> float:
    """
    Troco de uma venda. Só existe troco em dinheiro; nas demais formas é 0.
    Em dinheiro, o valor recebido é obrigatório e não pode ser menor que o total.
    """
    validar_metodo(metodo_pagamento)
    if metodo_pagamento != "dinheiro":
        return 0.0
    recebido = ler_valor(valor_recebido, "Valor recebido")
    total = round(total, 2)
    if recebido < total:
        raise ValidationError("Valor insuficiente!")
    return round(recebido - total, 2)


class Carrinho(ABC):
    """
    Operações comuns aos carrinhos. O operador é passado explicitamente.
    """

    def __init__(self, db: Session, operador_id: int):
        self.db = db
        self.operador_id = operador_id

    @property
    @abstractmethod
    def itens(self) -> List[LinhaCarrinho]:
        ...

    @property
    def total(self) -> float:
        return round(sum(linha.subtotal for linha in self.itens), 2)

    @property
    def vazio(self) -> bool:
        return not self.itens

    def quantidade_de(self, produto_id: int) -> int:
        return sum(l.quantidade for l in self.itens if l.produto_id == produto_id)

    @abstractmethod
    def adicionar(self, produto_id: int, quantidade: int = 1) -> None:
        ...

    def incrementar(self, produto_id: int) -> None:
        self.adicionar(produto_id, 1)

    @abstractmethod
    def decrementar(self, produto_id: int, quantidade: int = 1) -> None:
        ...

    def remover(self, produto_id: int) -> None:
        quantidade = self.quantidade_de(produto_id)
        if quantidade == 0:
            raise NotFoundError("Item não está no carrinho.")
        self.decrementar(produto_id, quantidade)

    @abstractmethod
    def finalizar(self, metodo_pagamento: Optional[str], valor_recebido=None) -> VendaFinalizada:
        ...

    def _validar_pagamento(self, metodo_pagamento, valor_recebido) -> float:
        validar_metodo(metodo_pagamento)
        if self.vazio:
            raise ConflictError("Não há itens para finalizar.")
        exigir_caixa_aberto(self.db, self.operador_id)
        return calcular_troco(self.total, metodo_pagamento, valor_recebido)


class CarrinhoRapido(Carrinho):
    """
    Venda de balcão. Os itens ficam só em memória (em `linhas`, que a página guarda
    no estado da sessão); o estoque é baixado apenas na finalização.
    """

    def __init__(self, db: Session, operador_id: int, linhas: Optional[List[LinhaCarrinho]] = None):
        super().__init__(db, operador_id)
        self.linhas = linhas if linhas is not None else []

    @property
    def itens(self) -> List[LinhaCarrinho]:
        return list(self.linhas)

    def _linha(self, produto_id: int) -> Optional[LinhaCarrinho]:
        return next((l for l in self.linhas if l.produto_id == produto_id), None)

    def adicionar(self, produto_id: int, quantidade: int = 1) -> None:
        quantidade = ler_quantidade(quantidade)
        exigir_caixa_aberto(self.db, self.operador_id)
        produto = obter_produto(self.db, produto_id)
        linha = self._linha(produto_id)
        desejada = quantidade + (linha.quantidade if linha else 0)
        if (produto.quantidade or 0) < desejada:
            raise ConflictError(
                f"Estoque insuficiente para {produto.nome} (disponível: {produto.quantidade})."
            )
        if linha:
            linha.quantidade = desejada
        else:
            self.linhas.append(
                LinhaCarrinho(
                    produto_id=produto.id,
                    nome=produto.nome,
                    quantidade=quantidade,
                    preco_unitario=float(produto.preco_venda or 0.0),
                )
            )

    def decrementar(self, produto_id: int, quantidade: int = 1) -> None:
        quantidade = ler_quantidade(quantidade)
        linha = self._linha(produto_id)
        if linha is None:
            raise NotFoundError("Item não está no carrinho.")
        if linha.quantidade <= quantidade:
            self.linhas.remove(linha)
        else:
            linha.quantidade -= quantidade

    def limpar(self) -> None:
        self.linhas.clear()

    def finalizar(self, metodo_pagamento: Optional[str], valor_recebido=None) -> VendaFinalizada:
        """
        Grava a venda já finalizada, seus itens e a baixa de estoque numa única transação.
        """
        troco = self._validar_pagamento(metodo_pagamento, valor_recebido)

        venda = Sale(
            colaborador_id=self.operador_id,
            status=STATUS_FINALIZADA,
            metodo_pagamento=metodo_pagamento,
        )
        with transacao(self.db):
            for linha in self.linhas:
                baixar_estoque(self.db, linha.produto_id, linha.quantidade)
                item = SaleItem(produto_id=linha.produto_id, preco_unitario=linha.preco_unitario)
                item.definir_quantidade(linha.quantidade)
                venda.itens.append(item)
            venda.recalcular_total()
            self.db.add(venda)

        resultado = VendaFinalizada(venda.id, venda.total, metodo_pagamento, troco)
        self.limpar()
        logger.info(
            "Venda rápida %s finalizada: %.2f (%s)", venda.id, venda.total, metodo_pagamento
        )
        return resultado


class Comanda(Carrinho):
    """
    Comanda (venda com status 'aberta'). Cada ação grava estoque, item e total
    da venda na mesma transação, então o total fica visível para todos na hora.
    """

    def __init__(self, db: Session, operador_id: int, venda_id: int):
        super().__init__(db, operador_id)
        venda = db.get(Sale, venda_id)
        if venda is None:
            raise NotFoundError("Comanda não encontrada.")
        self.venda = venda

    @property
    def itens(self) -> List[LinhaCarrinho]:
        return [
            LinhaCarrinho(
                produto_id=item.produto_id,
                nome=item.produto.nome if item.produto else "Produto desconhecido",
                quantidade=item.quantidade,
                preco_unitario=item.preco_unitario,
            )
            for item in self.venda.itens
        ]

    @property
    def total(self) -> float:
        return round(self.venda.total or 0.0, 2)

    def _exigir_aberta(self) -> None:
        if self.venda.status != STATUS_ABERTA:
            raise ConflictError("Esta venda já foi finalizada e não pode ser alterada.")

    def _item(self, produto_id: int) -> Optional[SaleItem]:
        return next((i for i in self.venda.itens if i.produto_id == produto_id), None)

    def adicionar(self, produto_id: int, quantidade: int = 1) -> None:
        quantidade = ler_quantidade(quantidade)
        self._exigir_aberta()
        with transacao(self.db):
            produto = baixar_estoque(self.db, produto_id, quantidade)
            item = self._item(produto_id)
            if item:
                item.definir_quantidade(item.quantidade + quantidade)
            else:
                item = SaleItem(produto_id=produto.id, preco_unitario=float(produto.preco_venda or 0.0))
                item.definir_quantidade(quantidade)
                self.venda.itens.append(item)
            self.venda.recalcular_total()

    def decrementar(self, produto_id: int, quantidade: int = 1) -> None:
        quantidade = ler_quantidade(quantidade)
        self._exigir_aberta()
        item = self._item(produto_id)
        if item is None:
            raise NotFoundError("Item não está na comanda.")
        devolvida = min(quantidade, item.quantidade)
        with transacao(self.db):
            devolver_estoque(self.db, produto_id, devolvida)
            if item.quantidade - devolvida <= 0:
                self.venda.itens.remove(item)
            else:
                item.definir_quantidade(item.quantidade - devolvida)
            self.venda.recalcular_total()

    def finalizar(self, metodo_pagamento: Optional[str], valor_recebido=None) -> VendaFinalizada:
        """
        Muda o status, grava a forma de pagamento e passa a venda para quem finalizou,
        cujo caixa recebe o valor. O estoque já foi baixado item a item.
        """
        self._exigir_aberta()
        troco = self._validar_pagamento(metodo_pagamento, valor_recebido)
        with transacao(self.db):
            resultado = self.db.execute(
                update(Sale)
                .where(Sale.id == self.venda.id, Sale.status == STATUS_ABERTA)
                .values(
                    status=STATUS_FINALIZADA,
                    metodo_pagamento=metodo_pagamento,
                    colaborador_id=self.operador_id,
                )
            )
            if resultado.rowcount == 0:
                raise ConflictError("Esta venda já foi finalizada ou não existe mais.")
        self.db.refresh(self.venda)

        logger.info(
            "Comanda %s finalizada: %.2f (%s)", self.venda.id, self.venda.total, metodo_pagamento
        )
        return VendaFinalizada(self.venda.id, self.total, metodo_pagamento, troco)


def abrir_comanda(
    db: Session,
    operador_id: int,
    numero_comanda: Optional[str] = None,
    nome_cliente: Optional[str] = None,
) -> Sale:
    venda = Sale(
        colaborador_id=operador_id,
        numero_comanda=(numero_comanda or "").strip() or None,
        nome_cliente=(nome_cliente or "").strip() or None,
        status=STATUS_ABERTA,
        total=0.0,
    )
    with transacao(db):
        db.add(venda)
    logger.info("Comanda %s aberta (nº %s)", venda.id, venda.numero_comanda or "-")
    return venda


def listar_comandas_abertas(db: Session) -> list[Sale]:
    return db.execute(
        select(Sale).where(Sale.status == STATUS_ABERTA).order_by(Sale.created_at, Sale.id)
    ).scalars().all()


def cancelar_comanda_vazia(db: Session, venda_id: int) -> None:
    """
    Exclui uma comanda sem itens (aberta por engano). Não há status 'cancelada'.
    """
    venda = db.get(Sale, venda_id)
    if venda is None:
        raise NotFoundError("Comanda não encontrada.")
    if venda.status != STATUS_ABERTA:
        raise ConflictError("Venda finalizada não pode ser cancelada.")
    if venda.itens:
        raise ConflictError("A comanda tem itens. Remova-os ou finalize a venda.")
    with transacao(db):
        db.delete(venda)
    logger.info("Comanda %s cancelada", venda_id)
