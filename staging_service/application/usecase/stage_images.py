"""Stage Images Use Case - Application Layer

Fan-out/fan-in engine: one task per (image, variation), run through a
bounded pool under a single batch deadline, reassembled in input order.
"""

import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

from ...domain.entity.errors import (
    ErrorKind,
    InternalError,
    StagingError,
    UpstreamRejectedError,
    ValidationError,
)
from ...domain.entity.staging import (
    BatchResult,
    CallerIdentity,
    Failure,
    GeneratedImage,
    GenerationRequest,
    GenerationTask,
    StyleDefinition,
    Success,
    TaskOutcome,
    UploadedImage,
)
from ...domain.repository.artifact_store import RESULTS, UPLOADS, ArtifactStore
from ...domain.repository.generation_client import GenerationClient, time_left
from ...domain.repository.style_catalog import StyleCatalog
from ...domain.service.prompt_composer import DEFAULT_STYLE_PROMPT, compose
from ...domain.service.result_aggregator import assemble

logger = logging.getLogger(__name__)

DEADLINE_MESSAGE = "Batch deadline reached before the variation finished"


class StageImagesUseCase:
    """批量布置用例

    编排领域对象完成 图片 × 变体 的生成流程
    """

    def __init__(
        self,
        generation_client: GenerationClient,
        artifact_store: ArtifactStore,
        style_catalog: StyleCatalog,
        variation_count: int = 3,
        max_concurrency: int = 4,
        budget_seconds: float = 110.0,
        cancel_grace_seconds: float = 2.0,
        max_attempts: int = 1,
        retry_backoff_seconds: float = 1.0,
        max_images: int = 5,
        max_image_bytes: int = 10 * 1024 * 1024,
    ):
        """初始化用例

        Args:
            generation_client: 上游生成客户端
            artifact_store: 产物存储
            style_catalog: 风格目录
            variation_count: 每张图片的变体数量
            max_concurrency: 同时进行的上游请求上限
            budget_seconds: 默认批处理时间预算
            cancel_grace_seconds: 截止后等待取消完成的最长时间
            max_attempts: 每个任务对临时性上游错误的最多尝试次数
            retry_backoff_seconds: 重试前的等待时间 (按次数递增)
            max_images: 每批最多图片数
            max_image_bytes: 单张图片最大字节数
        """
        if variation_count < 1:
            raise ValueError("variation_count must be positive")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be positive")
        if max_attempts < 1:
            raise ValueError("max_attempts must be positive")

        self._generation_client = generation_client
        self._artifact_store = artifact_store
        self._style_catalog = style_catalog
        self._variation_count = variation_count
        self._max_concurrency = max_concurrency
        self._budget_seconds = budget_seconds
        self._cancel_grace_seconds = cancel_grace_seconds
        self._max_attempts = max_attempts
        self._retry_backoff_seconds = retry_backoff_seconds
        self._max_images = max_images
        self._max_image_bytes = max_image_bytes

    @property
    def variation_indices(self) -> Tuple[int, ...]:
        return tuple(range(self._variation_count))

    async def execute(
        self,
        request: GenerationRequest,
        budget: Optional[float] = None,
        identity: Optional[CallerIdentity] = None,
    ) -> BatchResult:
        """执行用例：批量生成布置图

        Args:
            request: 批量请求
            budget: 时间预算 (秒)，默认使用配置值
            identity: 已验证的调用方身份，匿名时为 None

        Returns:
            与输入顺序一致的批量结果；单个任务的失败体现在 variations 中

        Raises:
            ValidationError: 请求无效 (此时不会创建任何任务)
            InternalError: 汇总阶段出现意外错误
        """
        # 1. 验证请求
        style = self.validate(request)

        # 2. 解析风格
        style_template = style.prompt_template if style else DEFAULT_STYLE_PROMPT
        if style is None and request.style_id:
            logger.info(
                f"Style '{request.style_id}' not found, using default style prompt with custom text"
            )

        # 3. 创建任务
        tasks = self.build_tasks(request, style_template)

        budget = self._budget_seconds if budget is None else budget
        loop = asyncio.get_running_loop()
        deadline = loop.time() + max(budget, 0.0)
        semaphore = asyncio.Semaphore(self._max_concurrency)

        caller = identity.user_id if identity else "anonymous"
        logger.info(
            f"Staging batch {request.id}: caller={caller}, images={len(request.images)}, "
            f"variations={self._variation_count}, tasks={len(tasks)}, budget={budget:.1f}s"
        )

        # 4. 保存原图 (每张一次) 与 5. 分发任务，共用同一截止时间
        original_jobs = [
            asyncio.ensure_future(self._persist_original(index, image))
            for index, image in enumerate(request.images)
        ]
        task_jobs = [
            asyncio.ensure_future(self._run_task(task, semaphore, deadline))
            for task in tasks
        ]
        jobs = original_jobs + task_jobs

        try:
            await self._settle(jobs, deadline)
        finally:
            for job in jobs:
                if not job.done():
                    job.cancel()

        persisted = [self._job_value(job, None) for job in original_jobs]
        outcomes: List[Tuple[GenerationTask, TaskOutcome]] = [
            (task, self._job_value(job, Failure(ErrorKind.TIMEOUT, DEADLINE_MESSAGE)))
            for task, job in zip(tasks, task_jobs)
        ]

        # 6. 汇总结果
        try:
            result = assemble(request, persisted, outcomes, self.variation_indices)
        except Exception as e:
            logger.error(f"Failed to assemble batch {request.id}: {e}", exc_info=True)
            raise InternalError("Failed to assemble staging results") from e

        logger.info(
            f"Staging batch {request.id} finished: "
            f"{len(tasks) - result.failed_count}/{len(tasks)} variations succeeded"
        )
        return result

    def validate(self, request: GenerationRequest) -> Optional[StyleDefinition]:
        """验证请求，返回解析到的风格 (可能为 None)

        Raises:
            ValidationError: 请求无效
        """
        count = len(request.images)
        if count < 1 or count > self._max_images:
            raise ValidationError(f"Please provide between 1 and {self._max_images} images")

        for position, image in enumerate(request.images, start=1):
            label = image.display_name or f"#{position}"
            if not image.data:
                raise ValidationError(f"Image {label} is empty")
            if not image.mime_type.startswith("image/"):
                raise ValidationError(
                    f"Image {label} has unsupported type '{image.mime_type}'"
                )
            if image.size > self._max_image_bytes:
                limit_mb = self._max_image_bytes / (1024 * 1024)
                raise ValidationError(f"Image {label} must be under {limit_mb:g} MB")

        style = self._style_catalog.get_style(request.style_id) if request.style_id else None
        if style is None and not request.has_custom_prompt:
            raise ValidationError("Please select a style or provide a custom prompt")

        return style

    def build_tasks(
        self, request: GenerationRequest, style_template: str
    ) -> List[GenerationTask]:
        """为每个 (图片, 变体) 构建任务"""
        prompts = {
            v: compose(style_template, request.custom_prompt, v)
            for v in self.variation_indices
        }
        return [
            GenerationTask(
                image_index=image_index,
                variation_index=v,
                prompt=prompts[v],
                source_image=image,
            )
            for image_index, image in enumerate(request.images)
            for v in self.variation_indices
        ]

    async def _settle(self, jobs: Sequence["asyncio.Future"], deadline: float) -> None:
        """等待所有任务结束，最多到截止时间；之后主动取消剩余任务"""
        _, pending = await asyncio.wait(jobs, timeout=max(time_left(deadline), 0.0))
        if not pending:
            return

        logger.warning(f"Batch deadline reached with {len(pending)} job(s) pending, cancelling")
        for job in pending:
            job.cancel()
        # 取消需要一点时间传递到底层连接
        await asyncio.wait(pending, timeout=self._cancel_grace_seconds)

    @staticmethod
    def _job_value(job: "asyncio.Future", default):
        if not job.done() or job.cancelled():
            return default
        return job.result()

    async def _persist_original(self, index: int, image: UploadedImage) -> Optional[str]:
        try:
            return await self._artifact_store.put(image.data, image.mime_type, UPLOADS)
        except Exception as e:
            logger.warning(f"Failed to persist original #{index} ({image.display_name}): {e}")
            return None

    async def _run_task(
        self,
        task: GenerationTask,
        semaphore: asyncio.Semaphore,
        deadline: float,
    ) -> TaskOutcome:
        """执行单个任务；任何错误都转换为 Failure，不会影响其他任务"""
        async with semaphore:
            if time_left(deadline) <= 0:
                return Failure(ErrorKind.TIMEOUT, DEADLINE_MESSAGE)
            try:
                generated = await self._generate(task, deadline)
            except StagingError as e:
                logger.warning(
                    f"Variation {task.variation_index} failed for "
                    f"{task.source_image.display_name}: {e.kind.value}: {e.message}"
                )
                return Failure(e.kind, e.message)
            except Exception as e:
                logger.error(
                    f"Variation {task.variation_index} failed unexpectedly for "
                    f"{task.source_image.display_name}: {e}",
                    exc_info=True,
                )
                return Failure(ErrorKind.INTERNAL, str(e) or type(e).__name__)

        # 存储不占用上游并发槽位
        try:
            artifact_ref = await self._artifact_store.put(
                generated.data, generated.mime_type, RESULTS
            )
        except Exception as e:
            logger.warning(
                f"Failed to persist variation {task.variation_index} for "
                f"{task.source_image.display_name}: {e}"
            )
            message = e.message if isinstance(e, StagingError) else str(e)
            return Failure(ErrorKind.STORAGE, message or "Failed to store generated image")

        return Success(artifact_ref=artifact_ref, caption=generated.caption)

    async def _generate(self, task: GenerationTask, deadline: float) -> GeneratedImage:
        """调用上游；仅对临时性错误做有限次数重试，且不超过截止时间"""
        attempt = 1
        while True:
            try:
                return await self._generation_client.generate(
                    task.source_image.data,
                    task.source_image.mime_type,
                    task.prompt,
                    deadline,
                )
            except UpstreamRejectedError as e:
                if not e.transient or attempt >= self._max_attempts:
                    raise
                wait = self._retry_backoff_seconds * attempt
                if time_left(deadline) <= wait:
                    raise
                logger.info(
                    f"Variation {task.variation_index} for {task.source_image.display_name}: "
                    f"attempt {attempt} failed transiently ({e.message}), retrying in {wait:g}s"
                )
                await asyncio.sleep(wait)
                attempt += 1
