"""
Business Layer - 业务模块层

LP 对冲系统的业务逻辑层，包含：
- monitoring: 持仓监控（数据桥接、通知策略、监控管道）
- notification: 消息推送系统
- trading: 对冲下单执行
- config: 配置管理
- cli: 命令行工具
"""
