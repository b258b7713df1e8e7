"""PM Copilot Core -- 项目状态模型、引导引擎、面板派生视图、导入导出"""
