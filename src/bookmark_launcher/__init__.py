"""Personal bookmark launcher: ordered categories of bookmark tiles with
resolved icons, two-stop color gradients and drag-to-reorder."""

from .colors import GradientPair, gradient
from .drag import DragPhase, DragReorderController, DragSession, ReorderDispatcher, ReorderIntent
from .icons import IconRef, SymbolLookup, resolve_icon
from .models import Bookmark, Category
from .ordering import array_move, assign_sort_orders
from .presentation import PresentationBinder, PresentationDescriptor

__version__ = "1.0.0"
