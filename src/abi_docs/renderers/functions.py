"""
Function renderer.

Each function becomes a block separated by a horizontal rule: header,
docs, parameters and results. How results are documented depends on the
ABI variant: a single ``Result`` entry when the caller owns the
representation, one anchored entry per named result when the callee does.
"""

from abi_docs.anchors import anchor_tag
from abi_docs.model import Function, Param, Primitive
from abi_docs.renderers.base import RenderContext


class FunctionRenderer:
    def render(self, ctx: RenderContext, func: Function) -> None:
        if ctx.functions_rendered == 0:
            ctx.push("# Functions\n\n")
        ctx.functions_rendered += 1

        ctx.push("----\n\n")
        anchor = ctx.anchors.register(func.name)
        ctx.push(f"#### {anchor_tag(anchor)} `{func.name}`\n\n")
        ctx.push_docs(func.docs)

        if func.params:
            ctx.push("##### Params\n\n")
            self._named_entries(ctx, func.name, func.params)

        if ctx.variant.multi_result:
            if func.results:
                ctx.push("##### Results\n\n")
                self._named_entries(ctx, func.name, func.results)
        else:
            ctx.push("##### Result\n\n")
            ctx.push(f"- {self._single_result(ctx, func)}\n")

        ctx.push("\n")

    def _named_entries(self, ctx: RenderContext, func_name: str, params: tuple[Param, ...]) -> None:
        for param in params:
            anchor = ctx.anchors.register(func_name, param.name)
            ctx.push(f"- {anchor_tag(anchor)} `{param.name}`: ")
            ctx.push_ty(param.ty)
            ctx.push("\n")

    def _single_result(self, ctx: RenderContext, func: Function) -> str:
        """Results as one type: ``unit``, the only result, or a tuple."""
        if not func.results:
            return Primitive.UNIT.value
        if len(func.results) == 1:
            return ctx.printer.format(func.results[0].ty)
        return f"({ctx.printer.format_list(r.ty for r in func.results)})"
