"""PM Copilot Gateway -- 本地 FastAPI 进程"""
