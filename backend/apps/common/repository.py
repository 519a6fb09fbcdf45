from typing import Generic, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar

from django.db import models

T = TypeVar("T", bound=models.Model)


class GenericRepository(Generic[T]):
    default_ordering: Sequence[str] = ("-id",)

    def __init__(self, model: Type[T]):
        self.model = model

    def _base_queryset(self):
        return self.model.objects.all()

    def get(self, **filters) -> Optional[T]:
        return self._base_queryset().filter(**filters).first()

    def list(self, **filters) -> Iterable[T]:
        return self._base_queryset().filter(**filters)

    def count(self, **filters) -> int:
        return self.model.objects.filter(**filters).count()

    def exists(self, **filters) -> bool:
        return self.model.objects.filter(**filters).exists()

    def page(
        self,
        *,
        offset: int,
        limit: int,
        ordering: Optional[Sequence[str]] = None,
        **filters,
    ) -> Tuple[List[T], int]:
        """Return one slice of the filtered rows plus the unsliced total."""
        qs = self._base_queryset().filter(**filters)
        total = qs.count()
        rows = list(qs.order_by(*(ordering or self.default_ordering))[offset : offset + limit])
        return rows, total

    def create(self, **data) -> T:
        return self.model.objects.create(**data)

    def update(self, obj: T, **data) -> T:
        for k, v in data.items():
            setattr(obj, k, v)
        obj.save()
        return obj

    def delete(self, obj: T):
        obj.delete()
